"""
Transfer progress tracking.

The counter may be advanced by the transfer loop while a UI thread
reads it, so every access goes through a lock.
"""
import threading
from typing import Callable, Optional


class TransferProgress:
    """
    Byte and item counters for an upload or download.

    Attributes:
        total_bytes: Total bytes to transfer
        total_items: Total chunks (upload) or files (download)
    """

    def __init__(self, total_bytes: int = 0, total_items: int = 0, label: str = ''):
        self.total_bytes = total_bytes
        self.total_items = total_items
        self.label = label
        self._transferred_bytes = 0
        self._completed_items = 0
        self._lock = threading.Lock()

    def advance(self, num_bytes: int) -> int:
        """Add transferred bytes; returns the new total."""
        with self._lock:
            self._transferred_bytes += num_bytes
            return self._transferred_bytes

    def complete_item(self) -> int:
        """Mark one chunk or file as done; returns the new count."""
        with self._lock:
            self._completed_items += 1
            return self._completed_items

    @property
    def transferred_bytes(self) -> int:
        with self._lock:
            return self._transferred_bytes

    @property
    def completed_items(self) -> int:
        with self._lock:
            return self._completed_items

    @property
    def percentage(self) -> float:
        """Returns progress as percentage of bytes."""
        with self._lock:
            if self.total_bytes == 0:
                return 100.0 if self._completed_items >= self.total_items else 0.0
            return (self._transferred_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True once every item is done."""
        with self._lock:
            return self._completed_items >= self.total_items

    def __repr__(self) -> str:
        return (
            f"TransferProgress({self.label!r}, {self.transferred_bytes}/{self.total_bytes} bytes, "
            f"{self.completed_items}/{self.total_items} items)"
        )


ProgressCallback = Optional[Callable[[TransferProgress], None]]
