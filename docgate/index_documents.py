"""Offline indexing pipeline: rebuilds the whole index from tracked URLs and stored files."""

import asyncio
import logging
import sys

from docgate.config import Settings
from docgate.embeddings import make_embedder
from docgate.extract import Fetcher
from docgate.ingest import Ingestor
from docgate.logging_config import setup_logging
from docgate.sources import list_files, read_urls
from docgate.store import VectorStore

logger = logging.getLogger(__name__)


def main() -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    settings.ensure_dirs()

    urls = read_urls(settings.urls_file)
    files = list_files(settings.files_dir)
    if not urls and not files:
        logger.warning(
            f"No sources to index. Add URLs to {settings.urls_file} or files to {settings.files_dir}"
        )
        if not settings.index_path.exists():
            VectorStore(settings.index_path, model=settings.embedding_model).save()
            logger.info(f"Empty index written to {settings.index_path}")
        return 0

    logger.info(f"Starting rebuild | urls={len(urls)} | files={len(files)}")
    store = VectorStore(settings.index_path, model=settings.embedding_model)
    ingestor = Ingestor(store, make_embedder(settings), Fetcher(), settings)
    report = asyncio.run(ingestor.rebuild())

    logger.info(f"Index written to {settings.index_path} | items={report.items}")
    for failure in report.failures:
        logger.error(f"Source skipped | source={failure['source']} | error={failure['error']}")
    return 1 if report.failures and not report.sources else 0


if __name__ == "__main__":
    sys.exit(main())
