"""Environment-driven settings for the viewer.

Values are read from the process environment after loading a local .env file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class ViewerConfig:
    """Settings for the backend connection and the viewer.

    Attributes:
        backend_url: Base URL of the graph query service
        timeout: Seconds before a backend request is cancelled
        search_debounce_ms: Quiet period before the search box refilters
        caption_max_length: Captions longer than this are truncated
        log_level: Logging level name for the scripts
        neo4j_uri: Graph database URI forwarded to the backend
        neo4j_username: Graph database user
        neo4j_password: Graph database password
        neo4j_database: Graph database name
    """

    backend_url: str = "http://localhost:8000"
    timeout: float = 60.0
    search_debounce_ms: int = 300
    caption_max_length: int = 40
    log_level: str = "INFO"
    neo4j_uri: str = ""
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""
    neo4j_database: str = "neo4j"

    @classmethod
    def from_env(cls) -> ViewerConfig:
        """Build a config from environment variables, keeping defaults for unset ones."""
        defaults = cls()
        return cls(
            backend_url=os.getenv("GRAPH_VIEW_BACKEND_URL", defaults.backend_url),
            timeout=_env_float("GRAPH_VIEW_TIMEOUT", defaults.timeout),
            search_debounce_ms=_env_int("GRAPH_VIEW_SEARCH_DEBOUNCE_MS", defaults.search_debounce_ms),
            caption_max_length=_env_int("GRAPH_VIEW_CAPTION_MAX_LENGTH", defaults.caption_max_length),
            log_level=os.getenv("GRAPH_VIEW_LOG_LEVEL", defaults.log_level).upper(),
            neo4j_uri=os.getenv("NEO4J_URI", defaults.neo4j_uri),
            neo4j_username=os.getenv("NEO4J_USERNAME", defaults.neo4j_username),
            neo4j_password=os.getenv("NEO4J_PASSWORD", defaults.neo4j_password),
            neo4j_database=os.getenv("NEO4J_DATABASE", defaults.neo4j_database),
        )

    def __repr__(self) -> str:
        return f"ViewerConfig(backend={self.backend_url}, timeout={self.timeout}s, db={self.neo4j_database})"
