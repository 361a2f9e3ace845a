from __future__ import annotations

from typing import Iterable, List


def available_emails(emails: Iterable[str], domains: Iterable[str]) -> List[str]:
    """Emails whose domain is one of the watched free-mail providers."""
    watched = {d.lower() for d in domains}
    found: List[str] = []
    for email in emails:
        _, sep, domain = (email or "").rpartition("@")
        if sep and domain.lower() in watched:
            found.append(email)
    return found
