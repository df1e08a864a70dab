# passwords.py

import logging

import bcrypt

logger = logging.getLogger("member-passwords")

DEFAULT_ROUNDS = 10


class PasswordHashError(Exception):
    """The hashing primitive failed to produce a digest."""


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Trả về bcrypt digest (có salt) cho mật khẩu dạng plaintext."""
    try:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    except (ValueError, TypeError) as e:
        logger.exception("bcrypt hashing failed")
        raise PasswordHashError(str(e)) from e
    return hashed.decode("utf-8")


def verify_password(digest: str, candidate: str) -> bool:
    """
    So khớp mật khẩu với digest đã lưu.
    Không bao giờ raise khi sai mật khẩu hoặc digest hỏng, chỉ trả về False.
    """
    if not digest:
        return False
    try:
        return bcrypt.checkpw(candidate.encode("utf-8"), digest.encode("utf-8"))
    except ValueError:
        return False
