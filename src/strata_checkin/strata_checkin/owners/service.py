from __future__ import annotations

from typing import Optional

from ..common.lots import lot_sort_key, normalize_lot
from ..common.logging_setup import get_logger
from .classifier import classify
from .model import OwnerClassification, OwnerContactInfo
from .repository import OwnerSource

log = get_logger("owners")


class OwnerDirectory:
    """Owners of one strata plan, fetched once per plan selection."""

    def __init__(self, plan_id: str, contacts: dict[str, OwnerContactInfo]):
        self.plan_id = plan_id
        self._contacts = contacts

    @classmethod
    async def load(cls, source: OwnerSource, plan_id: str) -> "OwnerDirectory":
        rows = await source.fetch_owners(plan_id)
        contacts = {normalize_lot(r.lot_id): r for r in rows}
        log.info("Loaded %d owner rows for plan %s", len(contacts), plan_id)
        return cls(plan_id, contacts)

    def __contains__(self, lot_id) -> bool:
        return normalize_lot(lot_id) in self._contacts

    def __len__(self) -> int:
        return len(self._contacts)

    def lots(self) -> list[str]:
        return sorted(self._contacts, key=lot_sort_key)

    def lookup(self, lot_id) -> Optional[OwnerContactInfo]:
        return self._contacts.get(normalize_lot(lot_id))

    def classify_lot(self, lot_id) -> OwnerClassification:
        return classify(self.lookup(lot_id))

    def unit_number(self, lot_id) -> str:
        contact = self.lookup(lot_id)
        if contact and contact.unit_number:
            return str(contact.unit_number)
        return "N/A"
