from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..domain.errors import ConfigError

DEFAULT_VECTOR_SIZE = 1536
DEFAULT_DISTANCE = "Cosine"
DEFAULT_EMBED_MODEL = "text-embedding-ada-002"
DEFAULT_CHAT_MODEL = "gpt-4"


def parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once and handed to each component."""

    collection: str
    api_key: str = ""
    vector_host: str = "localhost"
    vector_port: int = 6333
    vector_size: int = DEFAULT_VECTOR_SIZE
    distance: str = DEFAULT_DISTANCE
    embed_model: str = DEFAULT_EMBED_MODEL
    chat_model: str = DEFAULT_CHAT_MODEL
    http_timeout: float = 30.0
    items_db: str = "items.db"

    @property
    def qdrant_url(self) -> str:
        return f"http://{self.vector_host}:{self.vector_port}"


class _EnvReader:
    def __init__(self, environ: Mapping[str, str], dotenv: Mapping[str, str]) -> None:
        self._environ = environ
        self._dotenv = dotenv

    def get_str(self, name: str, default: str = "") -> str:
        v = self._environ.get(name)
        if v is not None and v.strip():
            return v.strip()
        v2 = self._dotenv.get(name)
        return v2.strip() if v2 is not None and v2.strip() else default

    def get_int(self, name: str, default: int) -> int:
        try:
            return int(self.get_str(name, str(default)))
        except ValueError:
            return default

    def get_float(self, name: str, default: float) -> float:
        try:
            return float(self.get_str(name, str(default)))
        except ValueError:
            return default


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """Build ``Settings`` from the process environment, falling back to .env in CWD."""
    env = _EnvReader(
        os.environ if environ is None else environ,
        parse_dotenv(dotenv_path or Path(".env")),
    )
    collection = env.get_str("COLLECTION_NAME")
    if not collection:
        raise ConfigError("COLLECTION_NAME not set in environment or .env")
    return Settings(
        collection=collection,
        api_key=env.get_str("OPENAI_API_KEY"),
        vector_host=env.get_str("VECTORDB_HOST", "localhost"),
        vector_port=env.get_int("QDRANT_PORT", 6333),
        vector_size=env.get_int("VECTOR_SIZE", DEFAULT_VECTOR_SIZE),
        distance=env.get_str("VECTOR_DISTANCE", DEFAULT_DISTANCE),
        embed_model=env.get_str("EMBED_MODEL", DEFAULT_EMBED_MODEL),
        chat_model=env.get_str("CHAT_MODEL", DEFAULT_CHAT_MODEL),
        http_timeout=env.get_float("HTTP_TIMEOUT", 30.0),
        items_db=env.get_str("ITEMS_DB_PATH", "items.db"),
    )
