"""Example genomes to drive the evolution engine."""

from __future__ import annotations

__all__ = ["bitstring"]
