# config.py

import os
from dataclasses import dataclass
from typing import Optional

TRUTHY = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in TRUTHY


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    api_key: Optional[str] = None
    bcrypt_rounds: int = 10
    expose_digest: bool = True
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Đọc cấu hình từ biến môi trường (MEMBERS_*)."""
    rounds = _env_int("MEMBERS_BCRYPT_ROUNDS", 10)
    if not 4 <= rounds <= 31:
        raise RuntimeError("MEMBERS_BCRYPT_ROUNDS must be between 4 and 31")

    return Settings(
        host=os.getenv("MEMBERS_HOST", "0.0.0.0"),
        port=_env_int("MEMBERS_PORT", 8080),
        api_key=os.getenv("MEMBERS_API_KEY") or None,
        bcrypt_rounds=rounds,
        expose_digest=_env_bool("MEMBERS_EXPOSE_DIGEST", True),
        log_level=os.getenv("MEMBERS_LOG_LEVEL", "INFO").upper(),
    )
