"""
Credentials and session models.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


class Credentials(BaseModel):
    """Server base URL plus the password login pair. Immutable."""

    model_config = ConfigDict(frozen=True)

    server: str
    user: str
    password: str

    @field_validator("server")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class Session(BaseModel):
    """Login response — the part of it worth persisting."""

    access_token: str = ""
    device_id: Optional[str] = None
    user_id: Optional[str] = None
