"""Error types and the error-to-suggestion lookup shown to users."""

from __future__ import annotations

from typing import Optional

from .config import SUGGESTIONS, UNKNOWN_ERROR_SUGGESTION


class NineError(Exception):
    """Base class for nine-cli errors."""


class ClientConfigError(NineError):
    """Kubeconfig could not be loaded or an API client could not be built."""


def give_suggestion(err: Optional[BaseException]) -> str:
    """
    Return the remediation hint for an error.

    Scans SUGGESTIONS in insertion order and returns the hint for the first
    key found in the error message. Falls back to a generic message asking
    for an issue report when nothing matches or err is None.
    """
    if err is not None:
        message = str(err)
        for needle, hint in SUGGESTIONS.items():
            if needle in message:
                return hint
    return UNKNOWN_ERROR_SUGGESTION
