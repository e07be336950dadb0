import uuid
from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.core.logging import get_logger
from app.models.ai_chat import AiChat, AiChatMessage, ChatRole
from app.models.base import utcnow
from app.models.notification import NotificationType
from app.models.user import User
from app.services.match_service import find_match
from app.services.notification_service import NotificationService
from app.services.profile_service import ProfileService
from app.services.task_queue import TaskQueue, TaskHandle

logger = get_logger(__name__)

GENERATE_AI_RESPONSE = "generate_ai_response"

SELF_CHAT_REASON = "Cannot chat with your own AI"
NOT_MATCHED_REASON = "You must be matched with this founder to chat with their AI"


def append_chat_message(
    db: Session,
    chat: AiChat,
    role: ChatRole,
    content: str,
    sources: Optional[List[Dict[str, Any]]] = None,
) -> AiChatMessage:
    """Append to the chat's message log; the caller commits."""
    message = AiChatMessage(
        chat_id=chat.id,
        position=chat.total_messages or 0,
        role=role,
        content=content,
        sources=sources if role == ChatRole.ASSISTANT else None,
    )
    db.add(message)
    chat.total_messages = (chat.total_messages or 0) + 1
    chat.last_message_at = utcnow()
    return message


class AiChatService:
    """Match-gated conversations with another founder's AI persona"""

    @staticmethod
    def get_chat(db: Session, participant_id: uuid.UUID, profile_owner_id: uuid.UUID) -> Optional[AiChat]:
        return db.query(AiChat).filter(
            AiChat.participant_id == participant_id,
            AiChat.profile_owner_id == profile_owner_id
        ).first()

    @staticmethod
    def send_ai_message(
        db: Session,
        user: User,
        profile_owner_id: uuid.UUID,
        message: str,
        task_queue: TaskQueue,
    ) -> Tuple[AiChat, TaskHandle]:
        """
        Store the participant's message and schedule the persona reply.
        Returns without waiting for the reply.
        """
        if user.id == profile_owner_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=SELF_CHAT_REASON)

        if not find_match(db, user.id, profile_owner_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_MATCHED_REASON)

        chat = AiChatService.get_chat(db, user.id, profile_owner_id)
        is_new = chat is None
        if is_new:
            chat = AiChat(participant_id=user.id, profile_owner_id=profile_owner_id, total_messages=0)
            db.add(chat)
            db.flush()

        append_chat_message(db, chat, ChatRole.USER, message)

        if is_new:
            NotificationService.create(
                db,
                user_id=profile_owner_id,
                type=NotificationType.AI_CHAT,
                title="Someone is chatting with your AI",
                message="A match started a conversation with your AI persona.",
                related_user_id=user.id,
                related_chat_id=chat.id,
            )

        db.commit()
        db.refresh(chat)

        handle = task_queue.enqueue(
            GENERATE_AI_RESPONSE,
            {"chat_id": chat.id, "profile_owner_id": profile_owner_id, "user_message": message},
        )
        logger.info("AI response scheduled", chat_id=str(chat.id), task_id=str(handle.id))
        return chat, handle

    @staticmethod
    def get_ai_chat(db: Session, user: User, profile_owner_id: uuid.UUID) -> Optional[AiChat]:
        return AiChatService.get_chat(db, user.id, profile_owner_id)

    @staticmethod
    def can_access(db: Session, user: User, profile_owner_id: uuid.UUID) -> Dict[str, Any]:
        if user.id == profile_owner_id:
            return {"can_access": False, "reason": SELF_CHAT_REASON}

        match = find_match(db, user.id, profile_owner_id)
        if not match:
            return {"can_access": False, "reason": NOT_MATCHED_REASON}

        return {"can_access": True, "matched_at": match.matched_at}

    @staticmethod
    def get_enhanced_ai_chat(db: Session, user: User, profile_owner_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        """Chat plus a short summary of the persona, None without a match or chat"""
        if not find_match(db, user.id, profile_owner_id):
            return None

        chat = AiChatService.get_chat(db, user.id, profile_owner_id)
        if not chat:
            return None

        profile = ProfileService.get_by_user_id(db, profile_owner_id)
        return {
            "id": chat.id,
            "participant_id": chat.participant_id,
            "profile_owner_id": chat.profile_owner_id,
            "last_message_at": chat.last_message_at,
            "total_messages": chat.total_messages,
            "messages": chat.messages,
            "profile_info": profile,
        }
