# app/utils/response.py

import logging
from typing import Any

import msgpack
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.core.config import settings

logger = logging.getLogger(__name__)

MSGPACK_MEDIA_TYPE = "application/x-msgpack"


class MessagePackResponse(Response):
    """
    Response class for MessagePack serialization.
    """

    media_type = MSGPACK_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        try:
            return msgpack.packb(content, use_bin_type=True)
        except Exception as exc:
            logger.error(
                "Failed to serialize content to MessagePack: %s", exc, exc_info=True
            )
            raise


def auto_response(request: Request, data: Any, status_code: int = 200) -> Response:
    """
    Return either a JSON or MessagePack response depending on the Accept header.
    Pydantic models and datetimes are reduced to plain JSON types first.
    """
    content = jsonable_encoder(data)
    accept = request.headers.get("accept", "")
    if settings.ENABLE_MSGPACK and MSGPACK_MEDIA_TYPE in accept:
        logger.debug("Returning response in MessagePack format (Accept: %s)", accept)
        return MessagePackResponse(content=content, status_code=status_code)
    return JSONResponse(content=content, status_code=status_code)
