"""
Tests for building the completion and embeddings clients from config
"""
import pytest
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from app.core import config
from app.services.llm import build_chat_model, build_embeddings_model


@pytest.fixture(autouse=True)
def llm_config(monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", "test-key")
    monkeypatch.setattr(config, "GROQ_API_KEY", "test-key")
    monkeypatch.setattr(config, "OPENAI_BASE_URL", None)
    monkeypatch.setattr(config, "LLM_MAX_TOKENS", 600)
    monkeypatch.setattr(config, "LLM_TEMPERATURE", 0.7)
    monkeypatch.setattr(config, "LLM_PRESENCE_PENALTY", 0.1)
    monkeypatch.setattr(config, "LLM_FREQUENCY_PENALTY", 0.1)


class TestChatModel:

    def test_openai_client_carries_sampling_settings(self, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER", "openai")

        llm = build_chat_model()

        assert isinstance(llm, ChatOpenAI)
        assert llm.max_tokens == 600
        assert llm.temperature == 0.7
        assert llm.presence_penalty == 0.1
        assert llm.frequency_penalty == 0.1

    def test_groq_client_is_built_without_penalties(self, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER", "groq")
        monkeypatch.setattr(config, "LLM_MODEL", "llama-3.1-8b-instant")

        llm = build_chat_model()

        assert isinstance(llm, ChatGroq)
        assert llm.model_name == "llama-3.1-8b-instant"
        assert llm.max_tokens == 600
        assert "presence_penalty" not in llm.model_kwargs
        assert "frequency_penalty" not in llm.model_kwargs


class TestEmbeddingsModel:

    def test_disabled_returns_none(self, monkeypatch):
        monkeypatch.setattr(config, "EMBEDDINGS_ENABLED", False)
        assert build_embeddings_model() is None

    def test_enabled_uses_configured_dimensions(self, monkeypatch):
        monkeypatch.setattr(config, "EMBEDDINGS_ENABLED", True)

        embeddings = build_embeddings_model()

        assert isinstance(embeddings, OpenAIEmbeddings)
        assert embeddings.dimensions == config.EMBEDDING_DIMENSIONS
