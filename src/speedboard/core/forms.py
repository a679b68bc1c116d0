from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


# Same shape browsers accept for <input type=email>
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def _validate_email(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("email is required")
    if not EMAIL_RE.match(v):
        raise ValueError("email is not a valid address")
    return v


class LoginForm(BaseModel):
    email: str
    password: str = Field(..., min_length=4)

    @field_validator("email")
    @classmethod
    def _email_validator(cls, v: str) -> str:
        return _validate_email(v)


class RegisterForm(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    email: str
    password: str = Field(..., min_length=6)
    repeat_password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _email_validator(cls, v: str) -> str:
        return _validate_email(v)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterForm":
        if self.password != self.repeat_password:
            raise ValueError("passwords do not match")
        return self


def form_errors(exc: ValidationError) -> List[str]:
    """Flatten a validation error into one readable line per problem."""
    out: List[str] = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid")
        out.append(f"{field}: {msg}" if field else msg)
    return out
