from __future__ import annotations

import re
from typing import List

from models.person import Person


_DOB_RE = re.compile(r"^(0[1-9]|1[0-2])/(0[1-9]|[12]\d|3[01])/(19|20)\d\d$")

MIN_AGE = 1
MAX_AGE = 120


def is_valid_dob(dob: str) -> bool:
    return bool(_DOB_RE.match(dob or ""))


def validate_person(person: Person) -> List[str]:
    """Return validation errors; an empty list means the record may be sent.

    Name, phone and email are optional.
    """
    errors: List[str] = []
    if person.dob and not is_valid_dob(person.dob):
        errors.append("Dob must be in mm/dd/yyyy format.")
    if person.age is not None and not (MIN_AGE <= person.age <= MAX_AGE):
        errors.append(f"Age must be a valid number between {MIN_AGE} and {MAX_AGE}.")
    return errors
