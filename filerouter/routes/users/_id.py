"""
Single user endpoint (/users/:id).

GET    -> the user record (id must be a positive integer)
DELETE -> only for callers sending ``X-Role: admin``; 403 otherwise
"""

from fastapi import status
from fastapi.responses import Response

from filerouter.routing import RouteBuilder, ValidatedRequest
from filerouter.schemas.messages import UserParams


def require_admin(request) -> bool:
    return request.headers.get("x-role") == "admin"


router = RouteBuilder({"delete": require_admin})

router.schema("get", params=UserParams)
router.schema("delete", params=UserParams)


@router.get
async def get_user(request: ValidatedRequest):
    params: UserParams = request.params
    return {"id": params.id, "name": f"user-{params.id}"}


@router.delete
async def delete_user(request: ValidatedRequest):
    return Response(status_code=status.HTTP_204_NO_CONTENT)
