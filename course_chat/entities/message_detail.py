# course_chat/entities/message_detail.py
"""Detail variants of a chat message.

A message carries exactly one detail and the detail's ``message_type`` must be
the message's own type. ``build_detail`` is the single place that turns send
input into the matching variant.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from course_chat.entities.message_type import MessageType


@dataclass(frozen=True)
class TextDetail:
    message_type: ClassVar[MessageType] = MessageType.TEXT

    content: Optional[str]


@dataclass(frozen=True)
class FileDetail:
    message_type: ClassVar[MessageType] = MessageType.FILE

    file_url: Optional[str]
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class AudioDetail:
    message_type: ClassVar[MessageType] = MessageType.AUDIO

    audio_url: Optional[str]
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    duration: Optional[int] = None
    mime_type: Optional[str] = None
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class VideoDetail:
    message_type: ClassVar[MessageType] = MessageType.VIDEO

    video_url: Optional[str]
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    mime_type: Optional[str] = None
    resolution: Optional[str] = None


MessageDetail = Union[TextDetail, FileDetail, AudioDetail, VideoDetail]


def build_detail(
    message_type: MessageType | str,
    *,
    content: Optional[str] = None,
    media_url: Optional[str] = None,
    file_name: Optional[str] = None,
    file_size: Optional[int] = None,
    thumbnail_url: Optional[str] = None,
    duration: Optional[int] = None,
    mime_type: Optional[str] = None,
    resolution: Optional[str] = None,
) -> MessageDetail:
    """Build the detail variant for ``message_type``.

    Raises ``ValueError`` for a type with no variant.
    """
    mtype = message_type if isinstance(message_type, MessageType) else MessageType.from_value(message_type)
    seconds = int(duration) if duration is not None else None

    if mtype is MessageType.TEXT:
        return TextDetail(content=content)
    if mtype is MessageType.FILE:
        return FileDetail(
            file_url=media_url,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
        )
    if mtype is MessageType.AUDIO:
        return AudioDetail(
            audio_url=media_url,
            file_name=file_name,
            file_size=file_size,
            duration=seconds,
            mime_type=mime_type,
            thumbnail_url=thumbnail_url,
        )
    if mtype is MessageType.VIDEO:
        return VideoDetail(
            video_url=media_url,
            file_name=file_name,
            file_size=file_size,
            thumbnail_url=thumbnail_url,
            duration=seconds,
            mime_type=mime_type,
            resolution=resolution,
        )
    raise ValueError(f"Unsupported message type: {message_type}")


def media_url_of(detail: MessageDetail) -> Optional[str]:
    if isinstance(detail, FileDetail):
        return detail.file_url
    if isinstance(detail, AudioDetail):
        return detail.audio_url
    if isinstance(detail, VideoDetail):
        return detail.video_url
    return None
