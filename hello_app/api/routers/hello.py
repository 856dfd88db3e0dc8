"""
Hello router.

The single business endpoint. Each request produces two manual spans under
the server span opened by the FastAPI instrumentation, then counts itself.
"""

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic_core import PydanticSerializationError

from hello_app.api.deps import get_telemetry
from hello_app.api.schemas.hello import HelloResponse
from hello_app.observability import (
    TelemetryContext,
    add_span_attributes,
    get_current_trace_id,
    record_exception,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Hello"],
)

GREETING = "Hello World"


def serialize_response(payload: HelloResponse) -> bytes:
    return payload.model_dump_json(by_alias=True).encode("utf-8")


def build_response() -> Tuple[Response, Optional[HelloResponse]]:
    """
    Build the HTTP response for a hello request.

    Must run inside the buildResponse span. A payload that cannot be
    serialized is recorded on the current span and turned into a 500.

    Returns:
        The response to send, and the payload if serialization succeeded.
    """
    payload = HelloResponse(message=GREETING)
    try:
        body = serialize_response(payload)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error("Failed to serialize hello response: %s", e)
        record_exception(e)
        return JSONResponse(
            status_code=500,
            content={"detail": "Failed to serialize response"},
        ), None

    add_span_attributes({"hello.response.size": len(body)})
    return Response(content=body, status_code=200, media_type="application/json"), payload


@router.get("/hello")
async def hello(telemetry: TelemetryContext = Depends(get_telemetry)) -> Response:
    """
    Greet the caller.

    Returns:
        {"Message": "Hello World"} as application/json
    """
    with telemetry.tracer.start_as_current_span("buildResponse"):
        response, payload = build_response()

    # Sibling of buildResponse, not its child
    with telemetry.tracer.start_as_current_span("mySpan"):
        if payload is not None and payload.is_valid():
            logger.info("The response is valid (trace_id=%s)", get_current_trace_id())

    telemetry.instruments.record_execution()

    return response
