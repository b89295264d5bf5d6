"""Exceptions raised by gf2t."""

from __future__ import annotations


class Gf2tError(Exception):
    """Base class for all gf2t errors."""


class FactProviderError(Gf2tError):
    """Branch facts could not be collected, so no analysis is possible."""


class NotARepositoryError(FactProviderError):
    """The given path is not inside a git working tree."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path
