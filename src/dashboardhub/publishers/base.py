"""Publisher interface for dashboard outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class Publisher(ABC, Generic[T]):
    """Publishes dashboard models into consumer-facing artifacts."""

    @abstractmethod
    def publish(self, records: Sequence[T]) -> None:
        """Publish records into output targets."""
