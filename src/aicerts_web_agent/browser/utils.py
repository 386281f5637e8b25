"""Utility helpers for browser sessions."""

from __future__ import annotations

from typing import Any, Mapping


def result_to_dict(result: Any) -> dict[str, Any]:
    """Return the agent result as a plain dictionary of JSON-friendly fields."""

    if result is None:
        return {}
    if hasattr(result, "model_dump"):
        return dict(result.model_dump(mode="json"))
    if isinstance(result, Mapping):
        return dict(result)
    if hasattr(result, "__dict__"):
        return {key: value for key, value in vars(result).items() if not key.startswith("_")}
    raise TypeError(f"Unsupported agent result type: {type(result).__name__}")
