from __future__ import annotations

import re
from typing import List, Optional, Tuple

from models.enrichment import EnrichedRecord, EnrichmentRequest, RequestAddress, ResponsePerson
from models.person import Address, Person


def format_phone_number(phone: Optional[str]) -> Optional[str]:
    """Render a 10-digit number as ###-###-####; None for anything else."""
    if not phone:
        return None
    digits = re.sub(r"\D", "", str(phone))
    m = re.match(r"^(\d{3})(\d{3})(\d{4})$", digits)
    if not m:
        return None
    return f"{m.group(1)}-{m.group(2)}-{m.group(3)}"


def map_person(person: Person) -> EnrichmentRequest:
    """Map a parsed Person to the Contact/Enrich request body."""
    return EnrichmentRequest(
        first_name=person.first_name or None,
        middle_name=person.middle_name or None,
        last_name=person.last_name or None,
        dob=person.dob or None,
        age=person.age or None,
        address=RequestAddress(
            address_line1=person.address.line1 or None,
            address_line2=person.address.line2 or None,
        ),
        phone=format_phone_number(person.phone),
        email=person.email or None,
    )


def split_address_line2(address: Address) -> Tuple[str, str, str]:
    """Split "city, state zip" back into its parts."""
    city, _, rest = (address.line2 or "").partition(",")
    tokens = rest.strip().split(" ")
    state = tokens[0] if tokens else ""
    zip_code = tokens[1] if len(tokens) > 1 else ""
    return city.strip(), state.strip(), zip_code.strip()


def _merge_values(primary: List[str], fallback: List[str]) -> List[str]:
    merged: List[str] = []
    for value in [*primary, *fallback]:
        if value and value not in merged:
            merged.append(value)
    return merged


def merge_enriched(response: ResponsePerson, original: Person) -> EnrichedRecord:
    """Merge API results with the original record; response values come first."""
    if response.addresses:
        addr = response.addresses[0]
        street, city, state, zip_code = addr.street, addr.city, addr.state, addr.zip
    else:
        street = original.address.line1
        city, state, zip_code = split_address_line2(original.address)

    return EnrichedRecord(
        record_id=original.record_id or "",
        dob=original.dob or "",
        full_name=original.full_name,
        street=street or "",
        city=city or "",
        state=state or "",
        zip=zip_code or "",
        phones=_merge_values(response.phone_list(), original.phones),
        emails=_merge_values(response.email_list(), original.emails),
    )
