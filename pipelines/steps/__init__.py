# Namespace for pipeline steps
from .parse_record import ParseRecord  # noqa: F401
from .validate_person import ValidatePerson  # noqa: F401
from .enrich_person import EnrichPerson  # noqa: F401
from .persist_record import PersistRecord  # noqa: F401
