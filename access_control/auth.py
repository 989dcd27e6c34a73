# access_control/auth.py
import hmac
from functools import wraps
from typing import Callable, Any, Optional

from flask import current_app, jsonify, request

TOKEN_PREFIX = "Token "


def extract_token(header_value: Optional[str]) -> Optional[str]:
    """`Authorization: Token <token>` -> `<token>`."""
    if not header_value or not header_value.startswith(TOKEN_PREFIX):
        return None
    token = header_value[len(TOKEN_PREFIX):].strip()
    return token or None


def authenticate_token(token: Optional[str], expected: str) -> bool:
    """Sprawdza token CPO względem skonfigurowanego OCPI_AUTH_TOKEN."""
    if not expected:
        # brak tokenu w konfiguracji = tryb dev, wszystko przechodzi
        return True
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def token_required(view_func: Callable) -> Callable:
    """Dekorator wymagający poprawnego tokenu OCPI."""

    @wraps(view_func)
    def wrapper(*args: Any, **kwargs: Any):
        expected = current_app.config.get("OCPI_AUTH_TOKEN", "")
        token = extract_token(request.headers.get("Authorization"))
        if not authenticate_token(token, expected):
            current_app.logger.warning("Rejected %s %s: bad or missing token", request.method, request.path)
            return jsonify({"error": "unauthorized", "message": "Missing or invalid OCPI token"}), 401
        return view_func(*args, **kwargs)

    return wrapper
