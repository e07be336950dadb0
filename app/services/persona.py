"""
AI persona responder.

Answers a participant's message in the voice of the profile owner: the
prompt is assembled from the owner's profile, social links and (when
enabled) snippets retrieved from the owner's public documents, then sent to
the chat model together with the recent conversation.
"""

import uuid
from typing import Callable, List, Dict, Any, Optional, Tuple

from sqlalchemy.orm import Session
from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.core.logging import get_logger
from app.models.ai_chat import AiChat, ChatRole
from app.models.profile import Profile
from app.models.social_connection import SocialConnection
from app.services.ai_chat_service import append_chat_message
from app.services.profile_service import ProfileService
from app.services.retrieval import get_context_for_ai_chat
from app.services.social_service import SocialService

logger = get_logger(__name__)

FALLBACK_MESSAGE = "I'm sorry, I'm having trouble responding right now. Please try again later."

RETRIEVAL_HISTORY_SIZE = 5
PROMPT_HISTORY_SIZE = 8

PERSONA_INSTRUCTIONS = """Instructions:
- Respond as {name} in first person
- Be helpful, engaging, and authentic
- Use the context from documents and social media to provide detailed, personalized answers
- Reference specific projects, experiences, or achievements when relevant
- If asked about something not in your context, politely say you don't have that information
- Keep responses conversational and friendly (aim for 1-3 paragraphs)
- Don't reveal that you're an AI - respond as if you're the actual person
- When discussing technical topics, use the person's actual experience level and expertise
- Feel free to mention specific companies, projects, or technologies from the context"""


def _social_lines(profile: Profile, connections: List[SocialConnection]) -> List[str]:
    lines = []
    for label, value in (
        ("Twitter", profile.twitter),
        ("Discord", profile.discord),
        ("LinkedIn", profile.linkedin),
        ("Portfolio", profile.portfolio),
    ):
        if value:
            lines.append(f"- {label}: {value}")
    for connection in connections:
        platform = getattr(connection.platform, "value", connection.platform)
        lines.append(f"- {platform}: {connection.profile_url}")
    return lines


def build_persona_prompt(
    profile: Profile,
    connections: List[SocialConnection],
    context: List[Dict[str, Any]],
) -> str:
    """System prompt that makes the model speak as the profile owner"""
    social = _social_lines(profile, connections)
    sources = [
        f"[Source {idx}: {item['source']} ({item['source_type']}) - Relevance: {item['relevance_score']:.2f}]\n"
        f"{item['content']}"
        for idx, item in enumerate(context, start=1)
    ]

    return f"""You are an AI assistant representing {profile.name}. You should respond as if you are them, based on the following information:

Profile Information:
- Name: {profile.name}
- Bio: {profile.bio}
- Skills: {", ".join(profile.skills or [])}
- Interests: {", ".join(profile.interests or [])}
- Looking for: {profile.looking_for}
- Experience: {profile.experience}
- Location: {profile.location or "Not specified"}

Social Media Presence:
{chr(10).join(social) if social else "None provided"}

Relevant Context from Personal Documents and Social Media:
{chr(10).join(sources) if sources else "None available"}

{PERSONA_INSTRUCTIONS.format(name=profile.name)}"""


def to_langchain_messages(history: List[Dict[str, str]]) -> List[BaseMessage]:
    return [
        HumanMessage(content=turn["content"]) if turn["role"] == ChatRole.USER.value
        else AIMessage(content=turn["content"])
        for turn in history
    ]


def sources_from_context(context: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One attribution per document, keeping its best relevance score"""
    best: Dict[str, Dict[str, Any]] = {}
    for item in context:
        document_id = str(item["document_id"])
        if document_id not in best or item["relevance_score"] > best[document_id]["relevance_score"]:
            best[document_id] = {
                "document_id": document_id,
                "title": item["source"],
                "relevance_score": float(item["relevance_score"]),
            }
    return sorted(best.values(), key=lambda s: s["relevance_score"], reverse=True)


class PersonaResponder:
    """
    Generates the assistant reply for an AI chat. Runs on the task queue
    worker with its own database session.
    """

    def __init__(
        self,
        llm: BaseChatModel,
        session_factory: Callable[[], Session],
        embeddings_model: Optional[Embeddings] = None,
        retrieval_enabled: bool = False,
    ):
        self.llm = llm
        self.session_factory = session_factory
        self.embeddings_model = embeddings_model
        self.retrieval_enabled = retrieval_enabled

    def generate_response(self, chat_id: uuid.UUID, profile_owner_id: uuid.UUID, user_message: str) -> None:
        """
        Append one assistant message to the chat. Failures are logged and
        answered with FALLBACK_MESSAGE instead of propagating.
        """
        db = self.session_factory()
        try:
            chat = db.query(AiChat).filter(AiChat.id == chat_id).first()
            if not chat:
                logger.error("AI chat not found, dropping response", chat_id=str(chat_id))
                return

            try:
                reply, sources = self._compose_reply(db, chat, profile_owner_id, user_message)
            except Exception:
                logger.exception(
                    "AI response generation failed",
                    chat_id=str(chat_id),
                    profile_owner_id=str(profile_owner_id),
                )
                db.rollback()
                reply, sources = FALLBACK_MESSAGE, []

            append_chat_message(db, chat, ChatRole.ASSISTANT, reply, sources=sources)
            db.commit()
        finally:
            db.close()

    def _retrieve(self, db: Session, owner_id: uuid.UUID, user_message: str, history: List[Dict[str, str]]):
        if not self.retrieval_enabled:
            return []
        return get_context_for_ai_chat(
            db,
            self.embeddings_model,
            user_message,
            owner_id,
            conversation_history=history,
        )

    def _compose_reply(
        self,
        db: Session,
        chat: AiChat,
        profile_owner_id: uuid.UUID,
        user_message: str,
    ) -> Tuple[str, List[Dict[str, Any]]]:
        profile = ProfileService.get_by_user_id(db, profile_owner_id)
        if not profile:
            raise LookupError(f"Profile not found for user {profile_owner_id}")

        history = [
            {"role": message.role.value, "content": message.content}
            for message in chat.messages
        ]

        context = self._retrieve(db, profile_owner_id, user_message, history[-RETRIEVAL_HISTORY_SIZE:])
        connections = SocialService.active_connections(db, profile_owner_id)

        messages = [
            SystemMessage(content=build_persona_prompt(profile, connections, context)),
            *to_langchain_messages(history[-PROMPT_HISTORY_SIZE:]),
        ]

        response = self.llm.invoke(messages)
        reply = response.content.strip() if isinstance(response.content, str) else ""
        if not reply:
            raise ValueError("No response from AI")

        return reply, sources_from_context(context)
