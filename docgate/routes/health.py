"""Liveness endpoint with index size and gate thresholds."""

from fastapi import APIRouter, Depends

from docgate.rag import RAGEngine
from docgate.routes.deps import get_rag_engine

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(rag: RAGEngine = Depends(get_rag_engine)):
    return rag.health()
