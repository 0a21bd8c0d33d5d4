"""Document store implementations."""

from dossier.records.store import DocumentStore
from dossier.records.stores.inmemory import InMemoryDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
]
