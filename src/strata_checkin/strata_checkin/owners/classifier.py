"""Owner identity heuristics.

Owners-directory rows carry two free-text name fields: the main contact
("Mr J S Mackenzie", "ACME PTY LTD", "John Smith & Jane Doe") and the name on
title. ``classify`` turns them into the identities a clerk can tick on the
check-in form.
"""

from __future__ import annotations

import re
from typing import Optional

from .model import OwnerClassification, OwnerContactInfo

SALUTATION_RE = re.compile(r"^(?:Mr|Mrs|Ms|Miss|Dr)\.?(?:\s+|$)", re.IGNORECASE)
COMPANY_RE = re.compile(
    r"\b(?:P/L|PTY\s+LTD|LIMITED|INVESTMENTS|MANAGEMENT|SUPERANNUATION\s+FUND)\b",
    re.IGNORECASE,
)
OWNER_SPLIT_RE = re.compile(r"\s*&\s*|\s+and\s+", re.IGNORECASE)
INITIAL_RE = re.compile(r"^(?:[A-Z]\.?|(?:[A-Z]\.){2,})$")


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def strip_salutation(name: str) -> str:
    return SALUTATION_RE.sub("", _text(name)).strip()


def is_company_name(name: str) -> bool:
    return bool(name) and COMPANY_RE.search(name) is not None


def is_initials_only(name: str) -> bool:
    """True for names like "Mr J S", "J.S." or "Mr J S Mackenzie".

    Every token but an optional trailing surname must be an initial.
    """
    tokens = strip_salutation(name).split()
    if not tokens:
        return False
    if not INITIAL_RE.match(tokens[0]):
        return False
    return all(INITIAL_RE.match(t) for t in tokens[:-1])


def split_owner_names(raw: str) -> set[str]:
    names = set()
    for fragment in OWNER_SPLIT_RE.split(_text(raw)):
        name = strip_salutation(fragment)
        if name:
            names.add(name)
    return names


def _company_name(main_contact: str, title_name: str) -> Optional[str]:
    main_is_company = is_company_name(main_contact)
    title_is_company = is_company_name(title_name)

    if main_is_company and title_is_company:
        return title_name if len(title_name) > len(main_contact) else main_contact
    if main_is_company:
        return main_contact
    if title_is_company:
        return title_name
    return None


def classify(contact: Optional[OwnerContactInfo]) -> OwnerClassification:
    """Classify a lot's owner contact into a company or a set of individuals.

    Returns ``unknown`` only when there is no directory row at all; a row whose
    fields yield no names gives an empty ``individuals`` result.
    """
    if contact is None:
        return OwnerClassification.unknown()

    main_contact = _text(getattr(contact, "main_contact_raw", None))
    title_name = _text(getattr(contact, "title_name_raw", None))

    company = _company_name(main_contact, title_name)
    if company:
        return OwnerClassification.company(company)

    primary = main_contact
    if main_contact and title_name and is_initials_only(main_contact):
        primary = title_name

    names = split_owner_names(primary)
    if not names and title_name:
        names = split_owner_names(title_name)

    return OwnerClassification.individuals(names)
