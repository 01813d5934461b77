from src.ingest_jolpica.api_client import JolpicaClient
from src.ingest_jolpica.cache import ResponseCache
from src.ingest_jolpica.errors import JolpicaError, TransportError, ValidationError
from src.ingest_jolpica.queries import F1Queries, build_request_key
from src.ingest_jolpica.schemas import validate_response

__all__ = [
    "F1Queries",
    "JolpicaClient",
    "JolpicaError",
    "ResponseCache",
    "TransportError",
    "ValidationError",
    "build_request_key",
    "validate_response",
]
