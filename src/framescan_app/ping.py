import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import Config, ConfigError, get_config
from .response import build_response, error_response

logger = logging.getLogger(__name__)

def handler(event: dict, context=None, config: Optional[Config] = None) -> dict:
    try:
        cfg = config or get_config()
    except ConfigError as e:
        logger.exception("Failed to load service config")
        return error_response(500, "Service misconfigured", details=str(e))
    logger.info(f"Ping request received: {json.dumps(event, default=str)}")

    request_id = (event.get("requestContext") or {}).get("requestId") or "unknown"
    body = {
        "message": "pong",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "requestId": request_id,
        "environment": cfg.get("service", "environment"),
        "version": cfg.get("service", "version"),
    }
    return build_response(200, body, allow_origin=cfg.get("response", "allow_origin", "*"))
