from typing import Optional

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from app.core import config


def build_chat_model() -> BaseChatModel:
    """
    Completion client for the AI persona, built once at startup and passed
    to whoever needs it.

    The Groq path leaves out LLM_PRESENCE_PENALTY and LLM_FREQUENCY_PENALTY:
    Groq's chat API does not support either penalty, so they only apply to
    OpenAI-compatible providers.
    """
    if config.LLM_PROVIDER == "groq":
        return ChatGroq(
            api_key=config.GROQ_API_KEY,
            model=config.LLM_MODEL,
            temperature=config.LLM_TEMPERATURE,
            max_tokens=config.LLM_MAX_TOKENS,
        )

    return ChatOpenAI(
        api_key=config.OPENAI_API_KEY,
        base_url=config.OPENAI_BASE_URL,
        model=config.LLM_MODEL,
        max_tokens=config.LLM_MAX_TOKENS,
        temperature=config.LLM_TEMPERATURE,
        presence_penalty=config.LLM_PRESENCE_PENALTY,
        frequency_penalty=config.LLM_FREQUENCY_PENALTY,
    )


def build_embeddings_model() -> Optional[Embeddings]:
    """None when embeddings are disabled; vector search then returns nothing."""
    if not config.EMBEDDINGS_ENABLED:
        return None
    return OpenAIEmbeddings(
        model=config.EMBEDDING_MODEL,
        api_key=config.OPENAI_API_KEY,
        base_url=config.OPENAI_BASE_URL,
        dimensions=config.EMBEDDING_DIMENSIONS,
    )
