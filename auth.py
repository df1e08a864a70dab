# auth.py
from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Request

logger = logging.getLogger("member-auth")

API_KEY_HEADER = "X-API-Key"


class AuthGate:
    """Chạy trước mọi request. Thay gate khác (token, session...) mà không đụng handler."""

    def check(self, request: Request) -> None:
        raise NotImplementedError


class OpenGate(AuthGate):
    # open access
    def check(self, request: Request) -> None:
        return None


class ApiKeyGate(AuthGate):
    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("api_key must not be empty")
        self.api_key = api_key

    def check(self, request: Request) -> None:
        supplied = request.headers.get(API_KEY_HEADER) or ""
        if not secrets.compare_digest(supplied.encode("utf-8"), self.api_key.encode("utf-8")):
            logger.warning("rejected request path=%s (bad or missing API key)", request.url.path)
            raise HTTPException(status_code=401, detail="Invalid or missing API key")


def build_gate(api_key: Optional[str]) -> AuthGate:
    """Nếu không cấu hình MEMBERS_API_KEY thì gate là no-op."""
    if not api_key:
        return OpenGate()
    return ApiKeyGate(api_key)


def require_auth(request: Request) -> None:
    gate: AuthGate = getattr(request.app.state, "auth_gate", None) or OpenGate()
    gate.check(request)
