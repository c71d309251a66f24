"""Base interface for dashboard source adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class DataAdapter(ABC, Generic[T]):
    """Adapter that converts a source file into dashboard models."""

    name: str

    @abstractmethod
    def read(self) -> Iterable[T]:
        """Yield models from the adapter source."""
