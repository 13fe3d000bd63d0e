# course_chat/api/schemas/message_schema.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from course_chat.api.schemas._datetime_serializer import serialize_dt


class MessageResponse(BaseModel):
    id: str
    course_id: str
    sender_id: str
    sender_name: str
    sender_role: str
    sender_thumbnail_url: Optional[str] = None
    type: str

    # TEXT
    content: Optional[str] = None

    # FILE
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None

    # AUDIO
    audio_url: Optional[str] = None
    audio_duration: Optional[int] = None

    # VIDEO
    video_url: Optional[str] = None
    video_thumbnail_url: Optional[str] = None
    video_duration: Optional[int] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class SimpleMessageResponse(BaseModel):
    id: str
    sender_id: str
    sender_name: str
    sender_thumbnail_url: Optional[str] = None
    sender_role: str
    type: str  # "text" | "file"
    content: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime | None):
        return serialize_dt(value)


class PageInfo(BaseModel):
    number: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool


class PaginatedMessagesResponse(BaseModel):
    content: List[MessageResponse] = []
    page: PageInfo


class MessagesListResponse(BaseModel):
    messages: List[SimpleMessageResponse] = []
    page: Optional[int] = None
    size: int
    total_elements: Optional[int] = None
    total_pages: Optional[int] = None


class SendMessageRequestInput(BaseModel):
    type: str = Field(min_length=1, max_length=30)
    # text for TEXT messages, media URL for FILE/AUDIO/VIDEO
    content: Optional[str] = None
    file_name: Optional[str] = Field(default=None, max_length=255)
    file_size: Optional[int] = Field(default=None, ge=0)
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    mime_type: Optional[str] = Field(default=None, max_length=100)
    resolution: Optional[str] = Field(default=None, max_length=20)


class AsyncSendMessageRequestInput(BaseModel):
    temp_id: Optional[str] = None
    type: Optional[str] = None
    content: Optional[str] = None

    # media is uploaded beforehand, only its URL and metadata come here
    file_url: Optional[str] = None
    file_name: Optional[str] = Field(default=None, max_length=255)
    file_size: Optional[int] = Field(default=None, ge=0)
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    mime_type: Optional[str] = Field(default=None, max_length=100)
    resolution: Optional[str] = Field(default=None, max_length=20)


class UpdateMessageRequestInput(BaseModel):
    type: str
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class AsyncMessageAcknowledgment(BaseModel):
    temp_id: str
    status: str
