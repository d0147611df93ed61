"""Cache key builders for consistent namespacing."""

from __future__ import annotations

GATES_PREFIX = "gates:"


def gate_list_key(terminal: str | None) -> str:
    """Build cache key for gate listings (optionally per terminal)."""
    return f"{GATES_PREFIX}list:{terminal or 'all'}"


def gate_statistics_key() -> str:
    """Build cache key for the gate status statistics."""
    return f"{GATES_PREFIX}statistics"
