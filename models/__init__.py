from .credential import Credential
from .person import Address, Person
from .enrichment import EnrichmentRequest, EnrichmentResponse, ResponsePerson, EnrichedRecord
from .outcome import RecordOutcome

__all__ = [
    "Credential",
    "Address",
    "Person",
    "EnrichmentRequest",
    "EnrichmentResponse",
    "ResponsePerson",
    "EnrichedRecord",
    "RecordOutcome",
]
