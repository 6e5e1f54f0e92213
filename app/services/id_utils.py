# app/services/id_utils.py
from typing import Iterable


def generate_application_id(existing_ids: Iterable[str]) -> str:
    """
    Next identifier: one past the largest numeric id already in use.
    Non-numeric ids are ignored for the max but never reused.
    """
    taken = set(existing_ids)
    numeric = [int(i) for i in taken if i.isascii() and i.isdigit()]
    candidate = max(numeric, default=0) + 1
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)
