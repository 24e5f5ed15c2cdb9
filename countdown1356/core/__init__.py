"""Lõi bộ đếm ngược.

Gồm kho thời điểm bắt đầu (CountdownStore) và bơm cập nhật hai nhịp (UpdatePump).
"""

from .countdown_store import CountdownStore
from .errors import PersistenceError
from .snapshot import CountdownSnapshot
from .update_pump import CycleState, UpdatePump

__all__ = [
    "CountdownSnapshot",
    "CountdownStore",
    "CycleState",
    "PersistenceError",
    "UpdatePump",
]
