# course_chat/infrastructure/database/models/__init__.py
# Importing the package registers every table on BaseModel.metadata.

from course_chat.infrastructure.database.models.role_model import RoleModel
from course_chat.infrastructure.database.models.user_model import UserModel
from course_chat.infrastructure.database.models.course_model import CourseModel
from course_chat.infrastructure.database.models.enrollment_model import EnrollmentModel
from course_chat.infrastructure.database.models.message_type_model import MessageTypeModel
from course_chat.infrastructure.database.models.message_model import MessageModel
from course_chat.infrastructure.database.models.message_text_model import MessageTextModel
from course_chat.infrastructure.database.models.message_file_model import MessageFileModel
from course_chat.infrastructure.database.models.message_audio_model import MessageAudioModel
from course_chat.infrastructure.database.models.message_video_model import MessageVideoModel

__all__ = [
    "RoleModel",
    "UserModel",
    "CourseModel",
    "EnrollmentModel",
    "MessageTypeModel",
    "MessageModel",
    "MessageTextModel",
    "MessageFileModel",
    "MessageAudioModel",
    "MessageVideoModel",
]
