"""Runtime configuration loaded from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    min_top_sim: float = 0.78
    min_avg_top3: float = 0.72
    top_k: int = 5
    admin_token: str = ""
    gemini_api_key: str = ""
    embedding_backend: str = "gemini"
    embedding_model: str = "gemini-embedding-001"
    chat_model: str = "gemini-2.5-flash"
    chunk_size: int = 800
    chunk_overlap: int = 200
    embed_batch_size: int = 64
    data_dir: Path = Path("data")
    ingest_dir: Path = Path("ingest")
    public_dir: Path = Path("public")
    log_level: str = "INFO"

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError("CHUNK_SIZE must be positive")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError(
                f"CHUNK_OVERLAP ({self.chunk_overlap}) must be >= 0 and smaller than "
                f"CHUNK_SIZE ({self.chunk_size})"
            )
        if self.embed_batch_size <= 0:
            raise ValueError("EMBED_BATCH_SIZE must be positive")

    @property
    def index_path(self) -> Path:
        return self.data_dir / "index.json"

    @property
    def files_dir(self) -> Path:
        return self.ingest_dir / "files"

    @property
    def urls_file(self) -> Path:
        return self.ingest_dir / "urls.txt"

    def ensure_dirs(self):
        for directory in (self.data_dir, self.ingest_dir, self.files_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", cls.host),
            port=_env_int("PORT", cls.port),
            min_top_sim=_env_float("MIN_TOP_SIM", cls.min_top_sim),
            min_avg_top3=_env_float("MIN_AVG_TOP3", cls.min_avg_top3),
            top_k=_env_int("TOP_K", cls.top_k),
            admin_token=os.getenv("ADMIN_TOKEN", ""),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            embedding_backend=os.getenv("EMBEDDING_BACKEND", cls.embedding_backend).strip().lower(),
            embedding_model=os.getenv("EMBEDDING_MODEL", cls.embedding_model),
            chat_model=os.getenv("CHAT_MODEL", cls.chat_model),
            chunk_size=_env_int("CHUNK_SIZE", cls.chunk_size),
            chunk_overlap=_env_int("CHUNK_OVERLAP", cls.chunk_overlap),
            embed_batch_size=_env_int("EMBED_BATCH_SIZE", cls.embed_batch_size),
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            ingest_dir=Path(os.getenv("INGEST_DIR", "ingest")),
            public_dir=Path(os.getenv("PUBLIC_DIR", "public")),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
