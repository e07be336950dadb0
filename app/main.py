from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.routes import profiles, discovery, matches, documents, ai_chat, notifications, social
from sqlalchemy import text
from app.core.config import LOG_LEVEL, PERSONA_RETRIEVAL_ENABLED, TASK_WORKER_ENABLED
from app.core.database import engine, Base, SessionLocal
from app.core.auth import initialize_firebase
from app.core.logging import setup_logging, get_logger
from app.services.ai_chat_service import GENERATE_AI_RESPONSE
from app.services.llm import build_chat_model, build_embeddings_model
from app.services.persona import PersonaResponder
from app.services.storage import BlobStore
from app.services.task_queue import TaskQueue
from app import models  # noqa: F401  registers every table on Base.metadata

logger = get_logger(__name__)

app = FastAPI(
    title="Co-founder Match API",
    servers=[
        {"url": "http://localhost:8000", "description": "local"},
    ]
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(profiles.router)
app.include_router(discovery.router)
app.include_router(matches.router)
app.include_router(documents.router)
app.include_router(ai_chat.router)
app.include_router(notifications.router)
app.include_router(social.router)


@app.on_event("startup")
def startup():
    setup_logging(LOG_LEVEL)

    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
    Base.metadata.create_all(bind=engine)
    initialize_firebase()

    embeddings_model = build_embeddings_model()
    responder = PersonaResponder(
        llm=build_chat_model(),
        session_factory=SessionLocal,
        embeddings_model=embeddings_model,
        retrieval_enabled=PERSONA_RETRIEVAL_ENABLED,
    )

    task_queue = TaskQueue()
    task_queue.register(GENERATE_AI_RESPONSE, responder.generate_response)
    if TASK_WORKER_ENABLED:
        task_queue.start()

    app.state.blob_store = BlobStore()
    app.state.embeddings_model = embeddings_model
    app.state.task_queue = task_queue
    logger.info(
        "Application started",
        embeddings_enabled=embeddings_model is not None,
        persona_retrieval=PERSONA_RETRIEVAL_ENABLED,
    )


@app.on_event("shutdown")
def shutdown():
    task_queue = getattr(app.state, "task_queue", None)
    if task_queue is not None:
        task_queue.stop()


@app.get("/")
def health_check():
    return {"status": "ok", "message": "Co-founder Match API is running"}
