"""
Analyse handler: counts MPEG audio frames in a request body.

The body arrives either as raw text or base64 (`isBase64Encoded`), is turned
into bytes and handed to the frame scanner. Status mapping:

    missing / oversize body  -> 400
    zero frames              -> 400
    frames found             -> 200 {"frameCount": n}
    anything else raised     -> 500 with the exception text as details
"""

import base64
import binascii
import logging
from typing import Optional

from framescan.mp3_parser import count_frames

from .config import Config, ConfigError, get_config
from .response import build_response, error_response

logger = logging.getLogger(__name__)


class MissingBodyError(Exception): ...
class PayloadTooLargeError(Exception): ...


def decode_body(event: dict, max_body_bytes: int) -> bytes:
    body = event.get("body")
    if body is None or len(body) == 0:
        raise MissingBodyError("Missing request body")

    if event.get("isBase64Encoded"):
        try:
            data = base64.b64decode(body, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 body: {e}") from e
    elif isinstance(body, str):
        data = body.encode("utf-8")
    else:
        data = bytes(body)

    if len(data) > max_body_bytes:
        raise PayloadTooLargeError(f"{len(data)} bytes exceeds limit of {max_body_bytes} bytes")
    return data

def handler(event: dict, context=None, config: Optional[Config] = None) -> dict:
    try:
        cfg = config or get_config()
    except ConfigError as e:
        logger.exception("Failed to load service config")
        return error_response(500, "Error processing MP3 payload", details=str(e))

    origin = cfg.get("response", "allow_origin", "*")
    try:
        data = decode_body(event, cfg.get("service", "max_body_bytes"))
        frames = count_frames(data)
    except MissingBodyError:
        logger.info("Rejected request without body")
        return error_response(400, "Missing request body", allow_origin=origin)
    except PayloadTooLargeError as e:
        logger.warning(f"Rejected oversize body: {e}")
        return error_response(400, "Payload too large", details=str(e), allow_origin=origin)
    except Exception as e:
        logger.exception("Failed to analyse MP3 payload")
        return error_response(500, "Error processing MP3 payload", details=str(e), allow_origin=origin)

    if frames == 0:
        logger.info(f"No MP3 frames in {len(data)} byte payload")
        return error_response(400, "No valid MP3 frames found", allow_origin=origin)

    logger.info(f"Counted {frames} frames in {len(data)} byte payload")
    return build_response(200, {"frameCount": frames}, allow_origin=origin)
