"""Shared route dependencies: engine lookup and the admin bearer-token check."""

import secrets

from fastapi import Depends, HTTPException, Request

from docgate.rag import RAGEngine


async def get_rag_engine(request: Request) -> RAGEngine:
    return request.app.state.rag


async def require_admin(request: Request, rag: RAGEngine = Depends(get_rag_engine)) -> None:
    admin_token = rag.settings.admin_token
    if not admin_token:
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN not set on server")

    auth = request.headers.get("authorization", "")
    token = auth[len("Bearer "):] if auth.startswith("Bearer ") else ""
    if not secrets.compare_digest(token.encode(), admin_token.encode()):
        raise HTTPException(status_code=401, detail="unauthorized")
