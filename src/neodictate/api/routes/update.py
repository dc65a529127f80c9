"""
Update Endpoints - operators change what a controller displays

All three shapes share one route; the dispatcher parses the path into an
UpdateKind:
- POST /update/basic/<id>    random palette color
- POST /update/rgbtime/<id>  {"Steps": [{"color": 16711680, "time": 1000}, ...]}
- POST /update/hsvtime/<id>  {"Steps": [{"color": {"h": 0, "s": 100, "v": 100}, "time": 1000}, ...]}
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from neodictate.api.dependencies import get_dispatcher
from neodictate.api.services.dictate_dispatcher import DictateDispatcher

router = APIRouter(tags=["Updates"])


@router.post(
    "/update{rest:path}",
    summary="Update an endpoint's dictate",
    response_class=PlainTextResponse,
)
async def update(
    request: Request,
    rest: str,
    dispatcher: DictateDispatcher = Depends(get_dispatcher)
) -> PlainTextResponse:
    """
    **Errors:**
    - 400: Wrong path shape, unknown update type, unknown id, bad body
    - 409: Endpoint reported a zero step length
    - 415: Body isn't JSON (rgbtime/hsvtime)
    """
    body = await request.body()
    confirmation = await dispatcher.update(
        request.url.path,
        body,
        request.headers.get("content-type"),
    )
    return PlainTextResponse(confirmation)
