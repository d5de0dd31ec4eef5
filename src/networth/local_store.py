"""Abstract interface for the local key -> string store.

Defines the LocalStore Protocol that PersistenceService depends on.
Concrete implementations live in ``networth.stores``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LocalStore(Protocol):
    """Synchronous string store that survives process restarts.

    The service uses two fixed keys: one for the OAuth token set and one
    for the document blob. ``set`` replaces the value wholesale.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
