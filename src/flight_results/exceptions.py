"""Exceptions raised by the flight result pipeline and its adapters."""

from typing import Optional


class FlightResultsError(Exception):
    """Base exception for all pipeline errors."""

    pass


class ProviderError(FlightResultsError):
    """
    An upstream flight-data provider failed.

    Attributes:
        provider: Provider name ('amadeus', 'duffel').
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        detail = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{provider}: {message}{detail}")


class ProviderAuthError(ProviderError):
    """Provider rejected credentials or no credentials were configured."""

    pass


class ProviderTimeoutError(ProviderError):
    """Provider did not answer within the configured timeout."""

    pass
