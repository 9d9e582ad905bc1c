"""
Wire payloads for the login, send and upload endpoints.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
from pydantic_core import to_json

HTML_FORMAT = "org.matrix.custom.html"


class MediaType(str, Enum):
    """Room message types for media events."""
    FILE = "m.file"
    IMAGE = "m.image"
    AUDIO = "m.audio"
    VIDEO = "m.video"


class Media(BaseModel):
    type: MediaType
    caption: str = ""
    filename: str = ""
    uri: str = ""


class LoginRequest(BaseModel):
    type: str = "m.login.password"
    user: str
    password: str


class SendMessageRequest(BaseModel):
    """m.room.message content. Empty optional fields are left off the wire."""
    room_id: str = Field(exclude=True)
    msgtype: str
    body: Optional[str] = None
    format: Optional[str] = None
    formatted_body: Optional[str] = None
    filename: Optional[str] = None
    url: Optional[str] = None

    def encode(self) -> bytes:
        data = self.model_dump(exclude_none=True)
        return to_json({k: v for k, v in data.items() if k == "msgtype" or v != ""})


class UploadResponse(BaseModel):
    content_uri: str
