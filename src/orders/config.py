"""
Runtime switches for the order library.

The only setting is whether the unchecked fast paths re-validate their
preconditions. It is off unless set explicitly or through the
``ORDERS_DEBUG_CHECKS`` environment variable.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEBUG_CHECKS_ENV = "ORDERS_DEBUG_CHECKS"

# None means "fall back to the environment"
debug_checks: Optional[bool] = None


def set_debug_checks(flag: Optional[bool]):
    """Turn precondition checks in unchecked constructors on or off."""
    global debug_checks
    debug_checks = flag
    logger.debug(f"Debug checks set to: {flag}")


def debug_checks_enabled() -> bool:
    """Return True if unchecked fast paths should validate their input."""
    if debug_checks is not None:
        return debug_checks
    value = os.environ.get(DEBUG_CHECKS_ENV, "")
    return value.strip().lower() in ("1", "true", "yes", "on")
