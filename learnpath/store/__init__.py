"""
Store: collaborator contracts and in-memory implementations.
"""

from learnpath.store.memory import (
    InMemoryAttemptLog,
    InMemoryContentCatalog,
    InMemoryMasteryStore,
    InMemoryXPLedger,
    LoggedAttempt,
)
from learnpath.store.protocols import AttemptLog, ContentCatalog, MasteryStore, XPLedger

__all__ = [
    # Protocols
    "AttemptLog",
    "ContentCatalog",
    "MasteryStore",
    "XPLedger",
    # In-memory
    "InMemoryAttemptLog",
    "InMemoryContentCatalog",
    "InMemoryMasteryStore",
    "InMemoryXPLedger",
    "LoggedAttempt",
]
