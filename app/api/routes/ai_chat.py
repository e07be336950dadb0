from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_task_queue
from app.core.database import get_db
from app.models.user import User
from app.schemas.ai_chat import (
    AiChatOut,
    AiMessageCreate,
    AiMessageAccepted,
    AiChatAccess,
    EnhancedAiChatOut,
)
from app.services.ai_chat_service import AiChatService
from app.services.task_queue import TaskQueue

router = APIRouter(prefix="/ai-chat", tags=["AI Chat"])


@router.post("/{profile_owner_id}/messages", response_model=AiMessageAccepted, status_code=status.HTTP_202_ACCEPTED)
def send_ai_message(
    profile_owner_id: UUID,
    req: AiMessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    task_queue: TaskQueue = Depends(get_task_queue)
):
    """
    Send a message to a matched founder's AI persona.

    The reply is generated in the background and appended to the chat;
    poll GET /ai-chat/{profile_owner_id} to read it.
    """
    chat, handle = AiChatService.send_ai_message(db, user, profile_owner_id, req.message, task_queue)
    return {"chat_id": chat.id, "task_id": handle.id}


@router.get("/{profile_owner_id}", response_model=AiChatOut | None)
def get_ai_chat(
    profile_owner_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return AiChatService.get_ai_chat(db, user, profile_owner_id)


@router.get("/{profile_owner_id}/access", response_model=AiChatAccess)
def can_access_ai_chat(
    profile_owner_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return AiChatService.can_access(db, user, profile_owner_id)


@router.get("/{profile_owner_id}/enhanced", response_model=EnhancedAiChatOut)
def get_enhanced_ai_chat(
    profile_owner_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    chat = AiChatService.get_enhanced_ai_chat(db, user, profile_owner_id)
    if chat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="AI chat not found")
    return chat
