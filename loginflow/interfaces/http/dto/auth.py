from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")


class LoginRequestDTO(BaseModel):
    """Structurally valid login submission; credentials are still unverified."""

    model_config = ConfigDict(validate_by_name=True)

    username: str = Field(min_length=3, max_length=20)
    password: str = Field(min_length=6, max_length=100, repr=False)
    remember: bool = False
    redirect_to: str | None = Field(None, alias="redirectTo", max_length=2048)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not _USERNAME_RE.match(value):
            raise PydanticCustomError(
                "username_invalid_chars",
                "Username can only include letters, numbers, and underscores",
                {"pattern": _USERNAME_RE.pattern},
            )
        # usernames are stored lowercase
        return value.lower()

    @field_validator("remember", mode="before")
    @classmethod
    def parse_checkbox(cls, value: object) -> object:
        # unchecked HTML checkboxes are simply absent; an empty string means off
        if value is None or value == "":
            return False
        return value

    def echo(self) -> LoginEchoDTO:
        return LoginEchoDTO(
            username=self.username,
            remember=self.remember,
            redirectTo=self.redirect_to,
        )


class LoginEchoDTO(BaseModel):
    """Submission echoed back to the client; has no password field."""

    model_config = ConfigDict(validate_by_name=True)

    username: str
    remember: bool = False
    redirect_to: str | None = Field(None, alias="redirectTo")


class LoginSubmissionDTO(BaseModel):
    payload: LoginEchoDTO
    error: dict[str, list[str]]


class LoginErrorDTO(BaseModel):
    status: str = "error"
    submission: LoginSubmissionDTO
