"""Utility modules for localScout.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at
  LocalScoutError; adapters wrap SDK exceptions into these so callers never
  import a vendor SDK to catch a failure.
- **concurrency** -- asyncio semaphore throttling and the named-source
  fan-out used by the inventory resolver.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **geo** -- location normalisation and haversine distance.
- **opening_hours** -- "is it open right now" over weekday maps and free text.
- **dates** -- calendar-date detection in free text for event lookups.
- **text_matching** -- rapidfuzz-based business-name matching and extraction.
"""

# -- Domain exception hierarchy --------------------------------------------
from localscout.utils.errors import (
    CompletionError,
    ConfigurationError,
    DataSourceError,
    LocalScoutError,
    ProviderUnavailableError,
    RateLimitError,
    ValidationError,
)

# -- Async concurrency helpers ---------------------------------------------
from localscout.utils.concurrency import gather_sources, throttled_gather

# -- Structured logging setup ----------------------------------------------
from localscout.utils.logging import configure_logging, get_logger

# -- Geometry, hours, dates --------------------------------------------------
from localscout.utils.dates import detect_calendar_date
from localscout.utils.geo import LatLng, distance_between, haversine_meters, normalize_location
from localscout.utils.opening_hours import is_open_now

# -- Business-name matching --------------------------------------------------
from localscout.utils.text_matching import extract_business_names, fuzzy_match, normalize_name

__all__ = [
    "CompletionError",
    "ConfigurationError",
    "DataSourceError",
    "LatLng",
    "LocalScoutError",
    "ProviderUnavailableError",
    "RateLimitError",
    "ValidationError",
    "configure_logging",
    "detect_calendar_date",
    "distance_between",
    "extract_business_names",
    "fuzzy_match",
    "gather_sources",
    "get_logger",
    "haversine_meters",
    "is_open_now",
    "normalize_location",
    "normalize_name",
    "throttled_gather",
]
