"""Abstract base class for vector-store backends.

The ingestion pipeline needs only three operations from a store: list
the collections that exist, create a collection, and upsert points
with acknowledgment.  Adding a backend means subclassing
:class:`VectorStoreBase` and implementing those three methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from rag_ingestion.ingestion.models import CollectionSpec, IndexPoint


class VectorStoreBase(ABC):
    """Backend-agnostic write interface to a vector store."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def list_collections(self) -> list[str]:
        """Return the names of every collection in the store."""
        ...

    @abstractmethod
    def create_collection(self, spec: CollectionSpec) -> None:
        """Create the collection described by *spec*.

        Implementations should not check for existence first; that is the
        caller's job.
        """
        ...

    @abstractmethod
    def upsert(self, collection_name: str, points: Sequence[IndexPoint], *, wait: bool = True) -> None:
        """Insert-or-replace *points* in *collection_name*.

        With ``wait=True`` the call must not return until the store has
        acknowledged the write; a rejected or unacknowledged write raises.
        """
        ...

    # -- optional overrides ---------------------------------------------------

    def collection_exists(self, name: str) -> bool:
        return name in self.list_collections()

    def count(self, collection_name: str) -> int:
        """Number of points in a collection.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support count")
