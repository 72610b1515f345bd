from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import OwnerKind


@dataclass(frozen=True)
class OwnerContactInfo:
    """Owners-directory row for one lot (reference data, read-only)."""

    lot_id: str
    main_contact_raw: Optional[str]
    title_name_raw: Optional[str]
    unit_number: Optional[str] = None


@dataclass(frozen=True)
class OwnerClassification:
    """Selectable identities for a lot: a company, a set of people, or nothing known."""

    kind: OwnerKind
    name: Optional[str] = None
    names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def company(cls, name: str) -> "OwnerClassification":
        return cls(kind=OwnerKind.COMPANY, name=name)

    @classmethod
    def individuals(cls, names) -> "OwnerClassification":
        return cls(kind=OwnerKind.INDIVIDUALS, names=frozenset(names))

    @classmethod
    def unknown(cls) -> "OwnerClassification":
        return cls(kind=OwnerKind.UNKNOWN)

    @property
    def is_company(self) -> bool:
        return self.kind == OwnerKind.COMPANY


@dataclass(frozen=True)
class StrataPlan:
    plan_id: str
    suburb: str
