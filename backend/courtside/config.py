import logging
import os


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _log_level(val):
    """Map a level name such as 'debug' to its logging constant; default INFO."""
    level = logging.getLevelName((val or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def allowed_origins():
    """
    Parse ALLOWED_ORIGINS into a list of trusted origins.

    Raises ValueError when unset, empty or containing the '*' wildcard.
    """
    raw = os.getenv("ALLOWED_ORIGINS", "").strip()
    if not raw:
        raise ValueError(
            "ALLOWED_ORIGINS environment variable must be set to a comma-separated "
            "list of trusted origins."
        )
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if not origins:
        raise ValueError("ALLOWED_ORIGINS must contain at least one non-empty origin.")
    if "*" in origins:
        raise ValueError(
            "ALLOWED_ORIGINS cannot include '*' (wildcard). Specify explicit, trusted origins."
        )
    return origins


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))
ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "true").lower() == "true"
LOG_LEVEL = _log_level(os.getenv("LOG_LEVEL"))
SENTRY_DSN = os.getenv("SENTRY_DSN")
