from __future__ import annotations


def lot_sort_key(lot_id: str) -> tuple[int, int, str]:
    """Natural ordering for lot numbers: numeric lots first, by value."""
    text = str(lot_id).strip()
    if text.isdigit():
        return (0, int(text), text)
    return (1, 0, text.upper())


def normalize_lot(lot_id) -> str:
    text = str(lot_id).strip()
    # "007" and "7" are the same lot.
    if text.isdigit():
        return str(int(text))
    return text
