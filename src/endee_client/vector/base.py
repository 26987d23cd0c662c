"""Vector store interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from endee_client.types import (
    FilterClause,
    IndexDescription,
    QueryOptions,
    QueryResult,
    VectorInfo,
    VectorItem,
)


class VectorStore(ABC):
    """Abstract interface for a remote vector index.

    Contract:
        All input validation happens before any request is sent, so an invalid
        batch or query never partially reaches the service.
    """

    @abstractmethod
    async def upsert(self, items: Sequence[VectorItem]) -> str:
        """Insert or update a batch of vectors.

        Args:
            items: Records to write (at most 1000 per call).

        Returns:
            A confirmation message.
        """
        ...

    @abstractmethod
    async def query(self, options: QueryOptions) -> list[QueryResult]:
        """Search for similar vectors.

        Args:
            options: Dense and/or sparse query with pagination and filters.

        Returns:
            Hits ordered as returned by the service.
        """
        ...

    @abstractmethod
    async def get_vector(self, vector_id: str) -> VectorInfo:
        """Fetch a stored vector by ID."""
        ...

    @abstractmethod
    async def delete_vector(self, vector_id: str) -> str:
        """Delete a vector by ID."""
        ...

    @abstractmethod
    async def delete_with_filter(
        self, filter: Sequence[FilterClause | dict[str, Any]]
    ) -> str:
        """Delete every vector matching the filter clauses."""
        ...

    @abstractmethod
    def describe(self) -> IndexDescription:
        """Return the index configuration captured by this handle."""
        ...
