"""Document ingestion pipeline: extract, chunk, embed and store, for uploads, URLs and full rebuilds."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from docgate.chunker import chunk_text
from docgate.config import Settings
from docgate.embeddings import Embedder
from docgate.extract import Fetcher, bytes_to_text
from docgate.logging_config import log_latency
from docgate.sources import add_url, list_files, read_urls, save_upload
from docgate.store import SOURCE_TYPES, IndexRecord, VectorStore, make_record_id

logger = logging.getLogger(__name__)


@dataclass
class RebuildReport:
    items: int = 0
    sources: List[str] = field(default_factory=list)
    failures: List[Dict[str, str]] = field(default_factory=list)


class Ingestor:
    def __init__(self, store: VectorStore, embedder: Embedder, fetcher: Fetcher, settings: Settings):
        self.store = store
        self.embedder = embedder
        self.fetcher = fetcher
        self.settings = settings

    async def build_records(self, text: str, source: str, source_type: str) -> List[IndexRecord]:
        if source_type not in SOURCE_TYPES:
            raise ValueError(f"Unknown source type: {source_type!r}")

        chunks = chunk_text(text, self.settings.chunk_size, self.settings.chunk_overlap)
        if not chunks:
            return []

        embeddings = await self.embedder.embed_async(chunks)
        return [
            IndexRecord(
                id=make_record_id(source_type, source, i),
                source=source,
                type=source_type,
                text=chunk,
                embedding=embedding,
            )
            for i, (chunk, embedding) in enumerate(zip(chunks, embeddings))
        ]

    async def ingest_text(self, text: str, source: str, source_type: str) -> int:
        records = await self.build_records(text, source, source_type)
        if not records:
            logger.warning(f"No chunks produced | source={source}")
            return 0
        return await asyncio.to_thread(self.store.append, records)

    @log_latency("ingest.upload")
    async def ingest_upload(self, filename: str, data: bytes) -> int:
        stored_name = await asyncio.to_thread(save_upload, self.settings.files_dir, filename, data)
        text = await asyncio.to_thread(bytes_to_text, data, filename)
        added = await self.ingest_text(text, stored_name, "file")
        logger.info(f"Indexed upload | file={stored_name} | chunks={added}")
        return added

    @log_latency("ingest.url")
    async def ingest_url(self, url: str) -> int:
        text = await self.fetcher.fetch_text(url)
        added = await self.ingest_text(text, url, "url")
        if add_url(self.settings.urls_file, url):
            logger.info(f"Tracking url | url={url}")
        logger.info(f"Indexed url | url={url} | chunks={added}")
        return added

    async def _records_for_url(self, url: str) -> List[IndexRecord]:
        text = await self.fetcher.fetch_text(url)
        return await self.build_records(text, url, "url")

    async def _records_for_file(self, path) -> List[IndexRecord]:
        data = await asyncio.to_thread(path.read_bytes)
        text = await asyncio.to_thread(bytes_to_text, data, path.name)
        return await self.build_records(text, path.name, "file")

    @log_latency("ingest.rebuild")
    async def rebuild(self) -> RebuildReport:
        """Re-ingest every tracked URL and stored file, then replace the whole index.

        A source that fails is logged, recorded in the report and left out;
        the remaining sources still make it into the new index.
        """
        report = RebuildReport()
        records: List[IndexRecord] = []

        jobs = [(url, self._records_for_url, url) for url in read_urls(self.settings.urls_file)]
        jobs += [(path.name, self._records_for_file, path) for path in list_files(self.settings.files_dir)]

        for source, build, arg in jobs:
            try:
                built = await build(arg)
            except Exception as e:
                logger.error(f"Rebuild failed for source | source={source} | error={e}")
                report.failures.append({"source": source, "error": str(e)})
                continue
            records.extend(built)
            report.sources.append(source)
            logger.info(f"Rebuilt source | source={source} | chunks={len(built)}")

        await asyncio.to_thread(self.store.replace, records)
        report.items = len(records)
        logger.info(
            f"Rebuild complete | items={report.items} | sources={len(report.sources)} "
            f"| failures={len(report.failures)}"
        )
        return report
