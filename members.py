# members.py — register / view / edit / delete / change-password
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

import pydantic

from member_model import (
    ChangePasswordRequest,
    EditProfileRequest,
    Member,
    MemberOut,
    RegisterRequest,
    to_out,
)
from member_store import MemberStore
from passwords import DEFAULT_ROUNDS, PasswordHashError, hash_password, verify_password

logger = logging.getLogger("member-api")


def describe_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Gộp lỗi pydantic thành một chuỗi `field: message; ...`."""
    parts = []
    for err in errors:
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


class MemberError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MemberError):
    status_code = 400


class MemberNotFound(MemberError):
    status_code = 404

    def __init__(self, message: str = "Member not found"):
        super().__init__(message)


class InvalidCredentials(MemberError):
    status_code = 401

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message)


class HashFailure(MemberError):
    status_code = 500


class MemberService:
    def __init__(self, store: MemberStore, bcrypt_rounds: int = DEFAULT_ROUNDS, expose_digest: bool = True):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self.expose_digest = expose_digest

    def _hash(self, password: str, failure_message: str) -> str:
        try:
            return hash_password(password, rounds=self.bcrypt_rounds)
        except PasswordHashError as e:
            raise HashFailure(failure_message) from e

    def _require(self, email: str) -> Member:
        member = self.store.get(email) if email else None
        if member is None:
            raise MemberNotFound()
        return member

    def register(self, req: RegisterRequest) -> MemberOut:
        digest = self._hash(req.password, "Failed to hash password")
        member = Member(**req.model_dump(exclude={"password"}), password=digest)

        replaced = self.store.put(member.email, member)
        logger.info("register email=%s replaced=%s", member.email, replaced)
        return to_out(member, expose_digest=self.expose_digest)

    def view_profile(self, email: str, today: Optional[date] = None) -> MemberOut:
        member = self._require(email)
        return to_out(member, expose_digest=self.expose_digest, today=today or date.today())

    @staticmethod
    def _parse_edit(raw: Union[bytes, str]) -> EditProfileRequest:
        try:
            return EditProfileRequest.model_validate_json(raw or b"")
        except pydantic.ValidationError as e:
            raise ValidationError(describe_errors(e.errors())) from e

    def edit_profile(self, email: str, body: Union[EditProfileRequest, bytes, str]) -> MemberOut:
        # existence first, then the body
        self._require(email)
        req = body if isinstance(body, EditProfileRequest) else self._parse_edit(body)

        def apply(member: Member) -> Member:
            return member.model_copy(update=req.model_dump())

        try:
            updated = self.store.update(email, apply)
        except KeyError:
            # deleted between the lookup and the write
            raise MemberNotFound()

        logger.info("profile updated email=%s", email)
        return to_out(updated, expose_digest=self.expose_digest)

    def delete_profile(self, email: str) -> None:
        if not email or not self.store.delete(email):
            raise MemberNotFound()
        logger.info("member deleted email=%s", email)

    def change_password(self, req: ChangePasswordRequest) -> None:
        member = self._require(req.email)

        if not verify_password(member.password, req.current_password):
            logger.warning("change-password rejected email=%s (wrong current password)", req.email)
            raise InvalidCredentials()

        if req.new_password != req.confirm_password:
            raise ValidationError("New password and confirm password do not match")

        digest = self._hash(req.new_password, "Failed to hash new password")

        try:
            self.store.update(req.email, lambda m: m.model_copy(update={"password": digest}))
        except KeyError:
            raise MemberNotFound()

        logger.info("password changed email=%s", req.email)
