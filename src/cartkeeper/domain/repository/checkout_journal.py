"""Abstract journal of checkouts in flight."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cartkeeper.domain.model.checkout import CheckoutRecord


class CheckoutJournal(ABC):

    @abstractmethod
    def save(self, record: CheckoutRecord) -> None:
        """Persist a new or updated record.  Must be durable before returning."""

    @abstractmethod
    def get(self, token: str) -> CheckoutRecord | None:
        """Return the record for *token*, or None if it was discarded."""

    @abstractmethod
    def discard(self, token: str) -> None:
        """Remove a record.  No-op if absent."""

    @abstractmethod
    def list_open(self) -> list[CheckoutRecord]:
        """Return every record that was never discarded."""
