"""Domain exceptions raised by the route engine and its collaborators."""

from __future__ import annotations


class RouteProfitError(Exception):
    """Base class for every error this package raises on purpose."""


class RouteValidationError(RouteProfitError):
    """Raised before any lookup when required route fields are missing or invalid."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class CityResolutionError(RouteProfitError):
    """A city in the route could not be turned into coordinates."""

    def __init__(self, city: str, reason: str = "could not be resolved"):
        self.city = city
        self.reason = reason
        super().__init__(f"City '{city}' {reason}")


class CityNotFoundError(CityResolutionError):
    def __init__(self, city: str):
        super().__init__(city, "was not found")


class GeocoderUnavailable(RouteProfitError):
    """The lookup service timed out or returned a transport / HTTP error."""


class SpreadsheetError(RouteProfitError):
    """The uploaded file is not a readable workbook."""


class LockUnavailable(RouteProfitError):
    """A shared write lock could not be taken before the wait ran out."""
