"""
Status Endpoint - polled by the LED controllers

Each controller calls GET /status?id=<mac>&leds=<n>&len=<ms> periodically.
The response body is the endpoint's serialized dictate, byte for byte what
the registry cached on the last write; the firmware compares TS with what it
is playing and restarts the sequence when it changes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from neodictate.api.dependencies import get_dispatcher
from neodictate.api.services.dictate_dispatcher import DictateDispatcher

router = APIRouter(tags=["Controllers"])


@router.get(
    "/status",
    summary="Get the current dictate",
    description="Report wiring (LED count, step length) and fetch the active color dictate",
    response_class=Response,
)
async def status(
    id: Optional[str] = Query(None, description="Controller MAC address (case-insensitive)"),
    leds: Optional[str] = Query(None, description="Number of LEDs on the string"),
    length: Optional[str] = Query(None, alias="len", description="Step period in milliseconds"),
    dispatcher: DictateDispatcher = Depends(get_dispatcher)
) -> Response:
    """
    **Example Response:**
    ```json
    {"TS":1700000000000000000,"Data":[{"Steps":10,"Colors":[16711680,16711680]}]}
    ```

    **Errors:**
    - 400: Missing/invalid parameter or unknown id
    """
    body = await dispatcher.status(id, leds, length)
    return Response(content=body, media_type="application/json")
