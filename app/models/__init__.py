from app.models.user import User
from app.models.profile import Profile
from app.models.swipe import Swipe, SwipeDirection
from app.models.match import Match, Message
from app.models.document import Document, SourceType
from app.models.chunk import Chunk
from app.models.ai_chat import AiChat, AiChatMessage, ChatRole
from app.models.social_connection import SocialConnection, SocialPlatform
from app.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "Profile",
    "Swipe",
    "SwipeDirection",
    "Match",
    "Message",
    "Document",
    "SourceType",
    "Chunk",
    "AiChat",
    "AiChatMessage",
    "ChatRole",
    "SocialConnection",
    "SocialPlatform",
    "Notification",
    "NotificationType",
]
