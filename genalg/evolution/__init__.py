"""Evolution module: selection, breeding, mutation and scoring."""

from __future__ import annotations

__all__ = [
    "individual",
    "sampling",
    "selection",
    "operators",
    "fitness",
]
