"""
Error taxonomy for transfer search.

Every error carries the HTTP status the API layer answers with, so the
router only has to translate, never decide.
"""


class TransferSearchError(Exception):
    """Base class for errors raised by the search engine."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TransferSearchError):
    """Bad or missing request fields, or a pickup time that is not in the future."""

    status_code = 400


class RouteNotFound(TransferSearchError):
    """No active route serves the airport/zone/direction combination."""

    status_code = 404

    def __init__(self, airport_id: int, zone_id: int, direction: str):
        super().__init__("No route found for this airport-zone combination")
        self.airport_id = airport_id
        self.zone_id = zone_id
        self.direction = direction


class CatalogUnavailable(TransferSearchError):
    """The catalog read failed. Nothing was written, so callers may retry."""

    status_code = 500


class SearchTimeout(TransferSearchError):
    """The search deadline elapsed before every tariff was priced."""

    status_code = 504
