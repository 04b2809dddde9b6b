"""JSON-file-backed implementation of CheckoutJournal."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from cartkeeper.domain.model.checkout import CheckoutRecord
from cartkeeper.domain.repository.checkout_journal import CheckoutJournal
from cartkeeper.infrastructure.persistence.json_file import JsonFile


class JsonCheckoutJournal(CheckoutJournal):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def save(self, record: CheckoutRecord) -> None:
        self._file.upsert(
            {
                "token": record.token,
                "owner_id": record.owner_id,
                "reservations": dict(record.reservations),
                "started_at": record.started_at.isoformat(),
            },
            key="token",
        )

    def get(self, token: str) -> CheckoutRecord | None:
        for raw in self._file.load():
            if raw["token"] == token:
                return self._to_domain(raw)
        return None

    def discard(self, token: str) -> None:
        self._file.remove_where(lambda raw: raw["token"] == token)

    def list_open(self) -> list[CheckoutRecord]:
        return [self._to_domain(raw) for raw in self._file.load()]

    @staticmethod
    def _to_domain(raw: dict) -> CheckoutRecord:
        return CheckoutRecord(
            token=raw["token"],
            owner_id=raw["owner_id"],
            reservations={pid: int(qty) for pid, qty in raw["reservations"].items()},
            started_at=datetime.fromisoformat(raw["started_at"]),
        )
