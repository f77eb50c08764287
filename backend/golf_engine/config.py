import logging
import os

logger = logging.getLogger(__name__)


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


def _interpolation(val):
    val = (val or "linear").strip().lower()
    if val not in ("linear", "nearest"):
        logger.warning("SG_INTERPOLATION must be 'linear' or 'nearest' (got %r); using linear", val)
        return "linear"
    return val


def _stake(val):
    if val is None or not val.strip():
        return 0.0
    try:
        stake = float(val)
    except ValueError:
        logger.warning("DEFAULT_STAKE_PER_POINT is not a valid float (got %r); defaulting to 0", val)
        return 0.0
    if stake < 0:
        logger.warning("DEFAULT_STAKE_PER_POINT cannot be negative; defaulting to 0")
        return 0.0
    return stake


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

SG_INTERPOLATION = _interpolation(os.getenv("SG_INTERPOLATION"))
DEFAULT_STAKE_PER_POINT = _stake(os.getenv("DEFAULT_STAKE_PER_POINT"))
