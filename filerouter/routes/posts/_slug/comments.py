"""
Comments of one post (/posts/:slug/comments).

No persistence: POST answers with the comment it would have stored.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from filerouter.routing import RouteBuilder, ValidatedRequest, ValidationSchemas
from filerouter.schemas.messages import MessageCreateRequest, SlugParams

router = RouteBuilder()

router.schema("get", params=SlugParams)
router.schema("post", ValidationSchemas(body=MessageCreateRequest, params=SlugParams))


@router.get
async def list_comments(request: ValidatedRequest):
    return {"slug": request.params.slug, "comments": []}


@router.post
async def create_comment(request: ValidatedRequest):
    body: MessageCreateRequest = request.body
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "slug": request.params.slug,
            "comment": body.model_dump(),
        },
    )
