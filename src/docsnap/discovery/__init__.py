"""URL discovery for docsnap.

The navigation harvester lives in :mod:`docsnap.discovery.navigation`; it is
not re-exported here because it depends on the document tree, which in turn
uses these URL helpers.
"""

from .filters import (
    SeenUrlTracker,
    absolutize_url,
    get_origin,
    has_excluded_extension,
    has_fragment,
    is_same_origin,
    normalize_url,
)

__all__ = [
    "SeenUrlTracker",
    "absolutize_url",
    "get_origin",
    "has_excluded_extension",
    "has_fragment",
    "is_same_origin",
    "normalize_url",
]
