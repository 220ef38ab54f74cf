"""
Echo endpoint.

GET /echo?text=hi&repeat=2  -> {"text": "hi hi"}
POST /echo {"message": "hi"} -> {"message": "hi", "author": null}

Both methods are logged and validated; handlers only ever see typed values.
"""

from filerouter.middleware import log_request
from filerouter.routing import RouteBuilder, ValidatedRequest
from filerouter.schemas.messages import EchoQuery, MessageCreateRequest

router = RouteBuilder({"*": log_request})

router.schema("get", query=EchoQuery)
router.schema("post", body=MessageCreateRequest)


@router.get
async def echo_query(request: ValidatedRequest):
    query: EchoQuery = request.query
    return {"text": " ".join([query.text] * query.repeat)}


@router.post
async def echo_message(request: ValidatedRequest):
    body: MessageCreateRequest = request.body
    return {"message": body.message, "author": body.author}
