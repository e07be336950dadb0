import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Completion provider
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "600"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_PRESENCE_PENALTY = float(os.getenv("LLM_PRESENCE_PENALTY", "0.1"))
LLM_FREQUENCY_PENALTY = float(os.getenv("LLM_FREQUENCY_PENALTY", "0.1"))

# Embeddings / retrieval
EMBEDDINGS_ENABLED = _env_bool("EMBEDDINGS_ENABLED")
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
# Must match the pgvector column size. text-embedding-3-small → 1536
EMBEDDING_DIMENSIONS = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))
PERSONA_RETRIEVAL_ENABLED = _env_bool("PERSONA_RETRIEVAL_ENABLED")

# Object storage (S3 compatible)
ACCESS_KEY = os.getenv("ACCESS_KEY")
SECRET_KEY = os.getenv("SECRET_KEY")
BUCKET = os.getenv("BUCKET", "cofounder-match")
REGION = os.getenv("REGION", "blr1")
ENDPOINT = os.getenv("ENDPOINT", "https://blr1.digitaloceanspaces.com")

FIREBASE_SERVICE_ACCOUNT_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
TASK_WORKER_ENABLED = _env_bool("TASK_WORKER_ENABLED", default=True)

DISCOVERY_BATCH_SIZE = 10
