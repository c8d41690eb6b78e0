"""Backend graph query client.

Fetches raw nodes and relationships for a set of documents from the graph
query service. Requests carry a cancellation token with a deadline; a result
that arrives after cancellation is discarded.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import requests

from graph_view.node import GraphType

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Mapping


logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = (
    "Request was cancelled due to timeout. The backend is taking too long to respond."
)
CANCELLED_MESSAGE = "Request was cancelled."
DEFAULT_FAILURE_MESSAGE = "Failed to load data from backend. Check your connection details."

# Query types understood by the backend's graph_query endpoint
QUERY_TYPES: Mapping[str, str] = {
    "DocChunks": "document",
    "Entities": "entities",
    "DocChunkEntities": "docEntities",
}


class FetchError(Exception):
    """The graph could not be fetched from the backend."""

    def __init__(self, message: str = DEFAULT_FAILURE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class FetchCancelledError(FetchError):
    """The request was cancelled before its result could be used."""

    def __init__(self, message: str = CANCELLED_MESSAGE) -> None:
        super().__init__(message)


class FetchTimeoutError(FetchCancelledError):
    """The request was cancelled because its deadline passed."""

    def __init__(self, message: str = TIMEOUT_MESSAGE) -> None:
        super().__init__(message)


class CancellationToken:
    """Cancellation flag with an optional deadline.

    The token is thread safe: the UI thread may cancel while a worker thread
    waits on the backend.
    """

    def __init__(
        self,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the token.

        Args:
            timeout: Seconds until the token expires (never if None)
            clock: Monotonic clock, injectable for tests
        """
        self._event = threading.Event()
        self._clock = clock
        self.deadline = clock() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Cancel the request; any result arriving later is discarded."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and self._clock() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def check(self) -> None:
        """Raise if the token was cancelled or has expired.

        Raises:
            FetchTimeoutError: The deadline passed
            FetchCancelledError: cancel() was called
        """
        if self.expired:
            raise FetchTimeoutError()
        if self.cancelled:
            raise FetchCancelledError()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled}, remaining={self.remaining()})"


@dataclass
class ConnectionSettings:
    """Graph database connection forwarded to the backend.

    Attributes:
        uri: Graph database URI
        username: Database user
        password: Database password
        database: Database name
        document_names: Documents whose graph should be fetched
    """

    uri: str = ""
    username: str = "neo4j"
    password: str = ""
    database: str = "neo4j"
    document_names: list[str] = field(default_factory=list)

    def add_document(self, name: str) -> bool:
        """Add a document name, ignoring blanks and duplicates.

        Returns:
            True if the name was added
        """
        name = name.strip()
        if not name or name in self.document_names:
            return False
        self.document_names.append(name)
        return True

    def add_documents(self, names: Collection[str]) -> int:
        """Add several document names, returning how many were new."""
        return sum(self.add_document(name) for name in names)

    def remove_document(self, index: int) -> None:
        """Remove the document name at a position (ignored if out of range)."""
        if 0 <= index < len(self.document_names):
            del self.document_names[index]

    def clear_documents(self) -> None:
        self.document_names.clear()

    @property
    def is_complete(self) -> bool:
        return bool(self.uri and self.password)

    def to_form(self) -> dict[str, str]:
        """Form fields the backend expects for the connection."""
        return {
            "uri": self.uri,
            "userName": self.username,
            "password": self.password,
            "database": self.database,
            "document_names": json.dumps(self.document_names),
        }

    def __repr__(self) -> str:
        # Never show the password
        return f"ConnectionSettings(uri={self.uri}, user={self.username}, documents={len(self.document_names)})"


def query_type_for(graph_types: Collection[GraphType]) -> str:
    """Pick the backend query for the active categories.

    Args:
        graph_types: Active categories

    Returns:
        Query key from QUERY_TYPES, or "" when nothing relevant is active
    """
    doc_chunks = GraphType.DOCUMENT_CHUNK in graph_types
    entities = GraphType.ENTITIES in graph_types

    if doc_chunks and entities:
        return "DocChunkEntities"
    if doc_chunks:
        return "DocChunks"
    if entities:
        return "Entities"
    return ""


def extract_graph_payload(body: Any) -> tuple[list[Any], list[Any]]:
    """Unwrap a backend response down to its nodes and relationships.

    Responses nest the graph under one or more "data" keys, e.g.
    {"data": {"data": {"nodes": [...], "relationships": [...]}}}.

    Args:
        body: Decoded response

    Returns:
        Tuple of (raw_nodes, raw_relationships); empty lists when absent
    """
    while (
        isinstance(body, dict)
        and "nodes" not in body
        and "relationships" not in body
        and "data" in body
    ):
        body = body["data"]

    if not isinstance(body, dict):
        return [], []

    nodes = body.get("nodes") or []
    relationships = body.get("relationships") or []
    return list(nodes), list(relationships)


class GraphQueryClient:
    """HTTP client for the backend graph query endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        session: requests.Session | None = None,
        endpoint: str = "graph_query",
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the backend
            timeout: Default request deadline in seconds
            session: requests session (a new one if None)
            endpoint: Path of the graph query endpoint
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.endpoint = endpoint.strip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.endpoint}"

    def fetch(
        self,
        query_type: str,
        connection: ConnectionSettings,
        token: CancellationToken | None = None,
    ) -> tuple[list[Any], list[Any]]:
        """Fetch the raw graph for the connection's documents.

        Args:
            query_type: Key of QUERY_TYPES, or a raw backend query type
            connection: Database connection and document names
            token: Cancellation token (one with the default timeout if None)

        Returns:
            Tuple of (raw_nodes, raw_relationships)

        Raises:
            FetchTimeoutError: The deadline passed
            FetchCancelledError: The token was cancelled
            FetchError: Any other transport or backend failure
        """
        token = token or CancellationToken(self.timeout)
        token.check()

        remaining = token.remaining()
        request_timeout = self.timeout if remaining is None else remaining

        form = connection.to_form()
        form["query_type"] = QUERY_TYPES.get(query_type, query_type)

        logger.info(
            "Fetching %s graph for %d documents from %s",
            form["query_type"],
            len(connection.document_names),
            self.url,
        )

        try:
            response = self.session.post(self.url, data=form, timeout=request_timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise FetchTimeoutError() from e
        except requests.RequestException as e:
            raise FetchError(str(e) or DEFAULT_FAILURE_MESSAGE) from e

        # Discard results that arrive after cancellation
        token.check()

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError("Backend returned a response that is not JSON.") from e

        if isinstance(body, dict) and body.get("status") == "Failed":
            raise FetchError(body.get("message") or body.get("error") or DEFAULT_FAILURE_MESSAGE)

        nodes, relationships = extract_graph_payload(body)
        logger.info("Fetched %d nodes and %d relationships", len(nodes), len(relationships))
        return nodes, relationships

    def close(self) -> None:
        self.session.close()

    def __repr__(self) -> str:
        return f"GraphQueryClient(url={self.url}, timeout={self.timeout})"
