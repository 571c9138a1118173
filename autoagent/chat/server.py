"""
Chat Server

FastAPI server exposing one chat session over HTTP.

Endpoints:
- GET /health: Health check
- GET /messages: Message history
- POST /chat: Send a message, get the produced messages back
- POST /chat/stream: Send a message, stream the reply as plain text
- GET /index: Indexed records
- DELETE /index: Clear the index
- POST /settings/api-key: Store an API key and enable the session
- GET /stats: Session statistics
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ..common.config import AppConfig, SUPPORTED_PROVIDERS, load_config, save_config
from ..common.credentials import ConfigCredentialProvider
from ..common.errors import IndexingInProgress, MissingCredential
from .session import ChatSession

logger = logging.getLogger("autoagent.chat.server")


# Global state
config: Optional[AppConfig] = None
session: Optional[ChatSession] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the session on startup"""
    global config, session

    logger.info("Starting up...")

    if session is None:
        config = load_config()
        session = ChatSession(config=config)
    elif config is None:
        config = session.config

    logger.info(
        "Session ready (provider: %s, LLM available: %s)",
        config.llm.provider,
        session.llm.is_available,
    )
    if not session.can_operate:
        logger.warning("No API key configured; chat and indexing are disabled until one is set")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="Auto Agent",
    description="Chat assistant with in-memory content indexing",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Request/Response Models
# =============================================================================

class ChatRequest(BaseModel):
    """Chat message request"""
    message: str


class ApiKeyRequest(BaseModel):
    """API key submission"""
    api_key: str
    provider: Optional[str] = None


def _require_session() -> ChatSession:
    if session is None:
        raise HTTPException(status_code=503, detail="Session not initialized")
    return session


def _dump(messages):
    return [m.model_dump(mode="json") for m in messages]


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/health")
def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "autoagent",
        "initialized": session is not None,
        "can_operate": session.can_operate if session else False,
        "provider": session.config.llm.provider if session else None,
        "indexed_items": len(session.store) if session else 0,
    }


@app.get("/messages")
def get_messages():
    """Get the session's message history"""
    current = _require_session()
    return {"messages": _dump(current.messages)}


@app.post("/chat")
def chat(request: ChatRequest):
    """Send a message; index requests and questions are both handled here."""
    current = _require_session()
    try:
        produced = current.send(request.message)
    except MissingCredential as e:
        raise HTTPException(status_code=503, detail=str(e))
    except IndexingInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"messages": _dump(produced)}


@app.post("/chat/stream")
def chat_stream(request: ChatRequest):
    """Send a message and stream the reply text"""
    current = _require_session()
    try:
        chunks = current.stream(request.message)
    except MissingCredential as e:
        raise HTTPException(status_code=503, detail=str(e))
    except IndexingInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


@app.get("/index")
def get_index():
    """List indexed records in insertion order"""
    current = _require_session()
    records = current.store.records
    return {
        "count": len(records),
        "records": [r.model_dump(mode="json") for r in records],
    }


@app.delete("/index")
def clear_index():
    """Clear the whole index"""
    current = _require_session()
    notice = current.clear_index()
    return {"status": "cleared", "message": notice.model_dump(mode="json")}


@app.post("/settings/api-key")
def set_api_key(request: ApiKeyRequest):
    """Store an API key for the active (or given) provider"""
    current = _require_session()
    api_key = request.api_key.strip()
    if not api_key:
        raise HTTPException(status_code=400, detail="API key is empty")

    provider = (request.provider or current.config.llm.provider).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(status_code=400, detail=f"Unsupported provider: {provider}")

    current.config.llm.provider = provider
    setattr(current.config.llm, f"{provider}_api_key", api_key)
    current.config._env_sourced_keys.discard(f"{provider}_api_key")
    try:
        save_config(current.config)
    except OSError as e:
        logger.warning("Failed to save config: %s", e)

    current.set_credentials(ConfigCredentialProvider(current.config))
    return {"ok": True, "provider": provider, "can_operate": current.can_operate}


@app.get("/stats")
def get_stats():
    """Get session statistics"""
    current = _require_session()
    messages = current.messages
    return {
        "service": "autoagent",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "messages": len(messages),
        "user_messages": sum(1 for m in messages if m.is_user),
        "indexed_items": len(current.store),
        "indexing": current.is_indexing,
        "llm": {
            "provider": current.config.llm.provider,
            "model": current.config.llm.model,
            "available": current.llm.is_available,
        },
    }


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the chat server"""
    import uvicorn

    server_config = load_config().server
    host = host or server_config.host
    port = port or server_config.port

    logger.info("Starting server on %s:%d", host, port)
    uvicorn.run(
        "autoagent.chat.server:app",
        host=host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
