"""Gated question answering endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from docgate.rag import QueryValidationError, RAGEngine
from docgate.routes.deps import get_rag_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["questions"])


class ChatRequest(BaseModel):
    message: Optional[str] = None


@router.post("/api/chat")
async def chat(body: ChatRequest, rag: RAGEngine = Depends(get_rag_engine)):
    try:
        return await rag.ask_async(body.message or "")
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Chat request failed")
        raise HTTPException(status_code=500, detail=str(e) or "server error")
