from __future__ import annotations


class PromptStoreError(Exception):
    """Base class for errors raised by the prompt store."""


class PersistenceError(PromptStoreError):
    """Any failure reported by the storage layer.

    Connectivity loss, constraint violations and driver errors are not
    distinguished; the message is the underlying error's text.
    """
