from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class Member(BaseModel):
    email: str
    password: str            # bcrypt digest, never plaintext once stored
    name: str
    date_of_birth: date
    gender: str
    address: str
    subscribed: bool


class RegisterRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str
    name: str
    date_of_birth: date
    gender: str
    address: str
    subscribed: bool


class EditProfileRequest(BaseModel):
    # name / password không sửa qua đường này
    date_of_birth: date
    gender: str
    address: str
    subscribed: bool


class ChangePasswordRequest(BaseModel):
    email: str
    current_password: str
    new_password: str
    confirm_password: str


class MemberOut(BaseModel):
    email: str
    password: Optional[str] = None
    name: str
    date_of_birth: date
    gender: str
    address: str
    subscribed: bool
    age: Optional[int] = None


def age_on(born: date, today: date) -> int:
    """Whole years between `born` and `today`, counting the birthday itself."""
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def to_out(member: Member, expose_digest: bool = True, today: Optional[date] = None) -> MemberOut:
    out = MemberOut(**member.model_dump())
    if not expose_digest:
        out.password = None
    if today is not None:
        out.age = age_on(member.date_of_birth, today)
    return out
