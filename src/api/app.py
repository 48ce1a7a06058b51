"""FastAPI application exposing ingestion, retrieval and chat to the site."""

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from config.settings import get_settings
from src.errors import PortfolioRAGError
from src.ingestion.pipeline import IngestionPipeline, build_ingestion_pipeline
from src.llm.chat import ChatMessage, ChatResponder
from src.retrieval.retriever import RetrievalService, build_retrieval_service
from src.vectorstore.base import VectorIndex
from src.vectorstore.chroma_store import build_chroma_store

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Portfolio RAG API",
    version="0.1.0",
    description="Ingestion and retrieval endpoints backing the portfolio chat widget.",
)


# ── Request / Response schemas ────────────────────────────────────────
class IngestRequest(BaseModel):
    """Optional override of the configured source paths."""

    paths: list[str] | None = None


class ContextRequest(BaseModel):
    query: str
    top_k: int | None = Field(default=None, ge=1, le=50)


class ContextResponse(BaseModel):
    context: str


class MessageModel(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    messages: list[MessageModel]


class ChatResponse(BaseModel):
    reply: str
    context_used: bool


# ── Dependencies ──────────────────────────────────────────────────────
@lru_cache
def get_store() -> VectorIndex:
    """One index handle for the process, shared by ingestion and retrieval."""
    settings = get_settings()
    return build_chroma_store(settings, settings.rag_config())


@lru_cache
def get_pipeline() -> IngestionPipeline:
    return build_ingestion_pipeline(get_settings(), store=get_store())


@lru_cache
def get_retriever() -> RetrievalService:
    return build_retrieval_service(get_settings(), store=get_store())


def get_responder(retriever: RetrievalService = Depends(get_retriever)) -> ChatResponder:
    from src.llm.config import get_llm

    return ChatResponder(retriever, get_llm())


def _to_chat_messages(request: ChatRequest) -> list[ChatMessage]:
    if not request.messages:
        raise HTTPException(status_code=400, detail="messages must not be empty")
    try:
        messages = [ChatMessage(role=m.role, content=m.content) for m in request.messages]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if messages[-1].role != "user":
        raise HTTPException(status_code=400, detail="last message must be from the user")
    return messages


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/api/ingest")
def ingest(
    request: IngestRequest | None = None,
    pipeline: IngestionPipeline = Depends(get_pipeline),
) -> dict:
    """Re-scrape and re-index the site; returns the run report."""
    paths = request.paths if request else None
    try:
        report = pipeline.run(paths)
    except PortfolioRAGError as e:
        logger.error("Ingestion run failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return report.to_dict()


@app.post("/api/context", response_model=ContextResponse)
def context(
    request: ContextRequest,
    retriever: RetrievalService = Depends(get_retriever),
) -> ContextResponse:
    """Return the retrieved context block for a query (empty when unavailable)."""
    return ContextResponse(context=retriever.retrieve(request.query, top_k=request.top_k))


@app.post("/api/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    responder: ChatResponder = Depends(get_responder),
) -> ChatResponse:
    """Answer the latest user message using retrieved site context."""
    messages = _to_chat_messages(request)
    try:
        result = responder.respond(messages)
    except Exception as e:
        logger.error("Chat API error: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process chat request") from e
    return ChatResponse(reply=result.reply, context_used=result.context_used)


@app.post("/api/chat/stream")
def chat_stream(
    request: ChatRequest,
    responder: ChatResponder = Depends(get_responder),
) -> StreamingResponse:
    """Stream the reply as plain text."""
    messages = _to_chat_messages(request)
    return StreamingResponse(responder.stream(messages), media_type="text/plain; charset=utf-8")
