# course_chat/repositories/message_detail_repository.py

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from course_chat.core.base_repository import BaseRepository
from course_chat.entities.message_detail import (
    AudioDetail,
    FileDetail,
    MessageDetail,
    TextDetail,
    VideoDetail,
)
from course_chat.entities.message_type import MessageType
from course_chat.infrastructure.database.models.message_audio_model import MessageAudioModel
from course_chat.infrastructure.database.models.message_file_model import MessageFileModel
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.infrastructure.database.models.message_text_model import MessageTextModel
from course_chat.infrastructure.database.models.message_video_model import MessageVideoModel

_DETAIL_MODELS = (MessageTextModel, MessageFileModel, MessageAudioModel, MessageVideoModel)


def _to_model(message_id: str, detail: MessageDetail):
    if isinstance(detail, TextDetail):
        return MessageTextModel(message_id=message_id, content=detail.content)
    if isinstance(detail, FileDetail):
        return MessageFileModel(
            message_id=message_id,
            file_url=detail.file_url,
            file_name=detail.file_name,
            file_size=detail.file_size,
            mime_type=detail.mime_type,
        )
    if isinstance(detail, AudioDetail):
        return MessageAudioModel(
            message_id=message_id,
            audio_url=detail.audio_url,
            file_name=detail.file_name,
            file_size=detail.file_size,
            duration=detail.duration,
            mime_type=detail.mime_type,
            thumbnail_url=detail.thumbnail_url,
        )
    if isinstance(detail, VideoDetail):
        return MessageVideoModel(
            message_id=message_id,
            video_url=detail.video_url,
            file_name=detail.file_name,
            file_size=detail.file_size,
            thumbnail_url=detail.thumbnail_url,
            duration=detail.duration,
            mime_type=detail.mime_type,
            resolution=detail.resolution,
        )
    raise TypeError(f"Unknown detail variant: {type(detail).__name__}")


def _to_detail(model) -> MessageDetail:
    if isinstance(model, MessageTextModel):
        return TextDetail(content=model.content)
    if isinstance(model, MessageFileModel):
        return FileDetail(
            file_url=model.file_url,
            file_name=model.file_name,
            file_size=model.file_size,
            mime_type=model.mime_type,
        )
    if isinstance(model, MessageAudioModel):
        return AudioDetail(
            audio_url=model.audio_url,
            file_name=model.file_name,
            file_size=model.file_size,
            duration=model.duration,
            mime_type=model.mime_type,
            thumbnail_url=model.thumbnail_url,
        )
    return VideoDetail(
        video_url=model.video_url,
        file_name=model.file_name,
        file_size=model.file_size,
        thumbnail_url=model.thumbnail_url,
        duration=model.duration,
        mime_type=model.mime_type,
        resolution=model.resolution,
    )


class MessageDetailRepository(BaseRepository[MessageTextModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def attach(self, *, message: MessageModel, message_type: MessageType, detail: MessageDetail) -> MessageDetail:
        if detail.message_type is not message_type:
            raise ValueError(
                f"Detail {detail.message_type.value} does not match message type {message_type.value}"
            )
        self._session.add(_to_model(message.id, detail))
        self._session.flush()
        return detail

    def get_by_message_ids(self, message_ids: list[str]) -> dict[str, MessageDetail]:
        if not message_ids:
            return {}

        out: dict[str, MessageDetail] = {}
        for model_cls in _DETAIL_MODELS:
            stmt = select(model_cls).where(model_cls.message_id.in_(message_ids))
            for row in self._session.execute(stmt).scalars().all():
                out[row.message_id] = _to_detail(row)
        return out

    def get(self, message_id: str) -> MessageDetail | None:
        return self.get_by_message_ids([message_id]).get(message_id)

    def set_text_content(self, *, message_id: str, content: str | None) -> None:
        text = self._session.get(MessageTextModel, message_id)
        if text is None:
            self._session.add(MessageTextModel(message_id=message_id, content=content))
        else:
            text.content = content
        self._session.flush()

    def delete_for_message(self, *, message_id: str) -> None:
        for model_cls in _DETAIL_MODELS:
            self._session.execute(delete(model_cls).where(model_cls.message_id == message_id))
