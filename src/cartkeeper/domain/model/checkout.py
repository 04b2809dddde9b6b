"""CheckoutRecord: the journal entry for a checkout in flight.

A record is opened before the first reservation of a checkout and
discarded once the order is persisted and the cart cleared.  A record
that outlives its process therefore names exactly the reservations that
must be compensated (or the cart that must still be cleared).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class CheckoutRecord:

    token: str
    owner_id: str
    reservations: dict[str, int] = field(default_factory=dict)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def open(owner_id: str) -> CheckoutRecord:
        return CheckoutRecord(token=uuid.uuid4().hex, owner_id=owner_id)

    def record_reservation(self, product_id: str, quantity: int) -> None:
        self.reservations[product_id] = self.reservations.get(product_id, 0) + quantity
