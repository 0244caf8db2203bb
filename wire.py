"""MessagePack support next to the default JSON request/response path."""
import msgpack
from flask import Response, g, jsonify, request

from errors import ValidationFailed
from log import get_logger

log = get_logger(__name__)

MSGPACK_MIMETYPE = "application/msgpack"


def encode(data) -> bytes:
    return msgpack.packb(data, use_bin_type=True)


def decode(payload: bytes):
    return msgpack.unpackb(payload, raw=False)


def decode_msgpack_body():
    """before_request hook: decode MessagePack bodies into ``g.body``."""
    if request.mimetype != MSGPACK_MIMETYPE:
        return
    try:
        g.body = decode(request.get_data())
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        log.warning("Rejected MessagePack body: %s", e)
        raise ValidationFailed("Invalid MessagePack data") from e


def get_body() -> dict:
    body = g.get("body")
    if body is None:
        body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def wants_msgpack() -> bool:
    best = request.accept_mimetypes.best_match(["application/json", MSGPACK_MIMETYPE])
    return best == MSGPACK_MIMETYPE


def respond(data, status: int = 200):
    """JSON response, or MessagePack when the client asks for it."""
    if wants_msgpack():
        try:
            return Response(encode(data), status=status, mimetype=MSGPACK_MIMETYPE)
        except (TypeError, ValueError, OverflowError) as e:
            log.warning("MessagePack encoding failed, falling back to JSON: %s", e)
    return jsonify(data), status
