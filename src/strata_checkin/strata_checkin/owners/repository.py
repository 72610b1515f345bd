from __future__ import annotations

from typing import Protocol, Sequence

from .model import OwnerContactInfo, StrataPlan


class OwnerSource(Protocol):
    async def fetch_strata_plans(self) -> Sequence[StrataPlan]:
        raise NotImplementedError

    async def fetch_owners(self, plan_id: str) -> Sequence[OwnerContactInfo]:
        raise NotImplementedError
