"""
QuoteWatch Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from quotewatch.services.base import (
    BaseService,
    ServiceError,
    ExternalAPIError,
    FetchError,
    ParseError,
    EmptySeriesError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ExternalAPIError",
    "FetchError",
    "ParseError",
    "EmptySeriesError",
]
