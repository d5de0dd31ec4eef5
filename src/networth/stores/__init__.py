from networth.stores.file import FileLocalStore
from networth.stores.memory import MemoryLocalStore

__all__ = ["FileLocalStore", "MemoryLocalStore"]
