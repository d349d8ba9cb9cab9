"""
Error types raised across Kreuzungen

An empty upstream answer is not an error: it is reported through
ResultStatus.NO_DATA on a PipelineResult.
"""

from typing import Optional


class KreuzungenError(RuntimeError):
    """Base class for all Kreuzungen errors"""


class UpstreamHttpError(KreuzungenError):
    """An upstream service answered with a non-2xx status or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedGeometryError(KreuzungenError, ValueError):
    """A geometry cannot be built or operated on"""


class AreaNotFoundError(KreuzungenError):
    """The geocoder returned no match for an area name"""


class RouteDecodeError(KreuzungenError, ValueError):
    """A GPX document or encoded polyline could not be turned into a route"""


class InvalidCategoryError(KreuzungenError, ValueError):
    """Unknown POI category"""


class POINotFoundError(KreuzungenError):
    """No POI matched a roulette request"""
