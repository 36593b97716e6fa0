"""Admin endpoints: inspect, delete, upload, add URLs and rebuild the index."""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel

from docgate.rag import RAGEngine
from docgate.routes.deps import get_rag_engine, require_admin

logger = logging.getLogger(__name__)

MAX_UPLOAD_FILES = 10

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class AddUrlRequest(BaseModel):
    url: Optional[str] = None


@router.get("/items")
async def list_items(rag: RAGEngine = Depends(get_rag_engine)):
    return {"total": len(rag.store), "groups": rag.store.sources()}


@router.delete("/source")
async def delete_source(source: str = Query(""), rag: RAGEngine = Depends(get_rag_engine)):
    if not source:
        raise HTTPException(status_code=400, detail="source query required")
    try:
        removed = await asyncio.to_thread(rag.store.delete_by_source, source)
    except Exception as e:
        logger.exception(f"Delete source failed | source={source}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"removed": removed}


@router.post("/upload")
async def upload(files: Optional[List[UploadFile]] = File(None), rag: RAGEngine = Depends(get_rag_engine)):
    if not files:
        raise HTTPException(status_code=400, detail="no files")
    if len(files) > MAX_UPLOAD_FILES:
        raise HTTPException(status_code=400, detail=f"at most {MAX_UPLOAD_FILES} files per upload")

    total = 0
    try:
        for f in files:
            data = await f.read()
            total += await rag.ingestor.ingest_upload(f.filename or "upload", data)
    except Exception as e:
        logger.exception("Upload failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "indexed": total}


@router.post("/add-url")
async def add_url(body: AddUrlRequest, rag: RAGEngine = Depends(get_rag_engine)):
    url = (body.url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="url required")

    try:
        added = await rag.ingestor.ingest_url(url)
    except Exception as e:
        logger.exception(f"Add url failed | url={url}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "indexed": added}


@router.post("/rebuild")
async def rebuild(rag: RAGEngine = Depends(get_rag_engine)):
    try:
        report = await rag.ingestor.rebuild()
    except Exception as e:
        logger.exception("Rebuild failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "items": report.items, "failures": report.failures}
