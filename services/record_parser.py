"""
Parsing of raw `;`-separated input lines into Person records.

Line layout (1-based fields):
    1 id, 2 date of birth (mm/dd/yyyy), 3 full name, 4 street,
    5 city, 6 state, 7 zip, 8 phone candidates, 9 email candidates
"""
from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Tuple

from models.person import Address, Person


MIN_FIELDS = 9

_CANDIDATE_SPLIT = re.compile(r"[|;]")
_PHONE_RE = re.compile(r"^\d{10}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def calculate_age(dob: str, today: Optional[date] = None) -> Optional[int]:
    """Whole years between `dob` (mm/dd/yyyy) and today; None if unparsable."""
    parts = (dob or "").strip().split("/")
    if len(parts) != 3:
        return None
    try:
        month, day, year = (int(p) for p in parts)
        born = date(year, month, day)
    except ValueError:
        return None
    today = today or date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def split_name(full_name: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    tokens = (full_name or "").split()
    if not tokens:
        return None, None, None
    first = tokens[0]
    last = tokens[-1]
    middle = " ".join(tokens[1:-1]) if len(tokens) > 2 else None
    return first, middle, last


def extract_phones(raw: Optional[str]) -> List[str]:
    phones: List[str] = []
    for item in _CANDIDATE_SPLIT.split(raw or ""):
        cleaned = re.sub(r"\D", "", item)
        if _PHONE_RE.match(cleaned):
            phones.append(cleaned)
    return phones


def extract_emails(raw: Optional[str]) -> List[str]:
    emails: List[str] = []
    for item in _CANDIDATE_SPLIT.split(raw or ""):
        candidate = item.strip()
        if _EMAIL_RE.match(candidate):
            emails.append(candidate)
    return emails


def parse_record(line: str, today: Optional[date] = None) -> Optional[Person]:
    """Parse one input line. Returns None when the line has fewer than 9 fields."""
    parts = (line or "").strip().split(";")
    if len(parts) < MIN_FIELDS:
        return None

    first, middle, last = split_name(parts[2].strip())
    dob = parts[1].strip()
    phones = extract_phones(parts[7])
    emails = extract_emails(parts[8])

    return Person(
        record_id=parts[0].strip(),
        first_name=first,
        middle_name=middle,
        last_name=last,
        dob=dob,
        age=calculate_age(dob, today=today),
        address=Address(
            line1=parts[3].strip(),
            line2=f"{parts[4].strip()}, {parts[5].strip()} {parts[6].strip()}",
        ),
        phone=phones[0] if phones else None,
        email=emails[0] if emails else None,
        phones=phones,
        emails=emails,
    )
