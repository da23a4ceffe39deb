import json
from typing import Optional

SECURITY_HEADERS = {
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS,PATCH",
    "Access-Control-Allow-Credentials": True,
    "Strict-Transport-Security": "max-age=31536000;includeSubDomains",
    "X-XSS-Protection": "0",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "Deny",
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "Content-Security-Policy": "frame-ancestors 'none'; default-src 'self'",
    "Referrer-Policy": "no-referrer",
    "Feature-Policy": "none",
    "Content-Type": "application/json",
    "X-Permitted-Cross-Domain-Policies": "none",
}

def build_response(status_code: int, body: dict, allow_origin: str = "*") -> dict:
    """API Gateway proxy response with a JSON body."""
    headers = dict(SECURITY_HEADERS)
    headers["Access-Control-Allow-Origin"] = allow_origin
    return {
        "isBase64Encoded": False,
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(body),
    }

def error_response(status_code: int, message: str, details: Optional[str] = None, allow_origin: str = "*") -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return build_response(status_code, body, allow_origin=allow_origin)
