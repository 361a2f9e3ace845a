from .enrichment import EnrichmentClientPort, ClientFactory
from .sink import OutputSinkPort

__all__ = [
    "EnrichmentClientPort",
    "ClientFactory",
    "OutputSinkPort",
]
