"""
Helpers shared by the calculator endpoints.
"""

import logging

from fastapi import HTTPException

from fincalc.calculations.errors import InvalidInput
from fincalc.config import get_settings

logger = logging.getLogger(__name__)


def bad_request(exc: InvalidInput) -> HTTPException:
    """Translate an engine input error into a 400 response."""
    logger.info(f"Rejected input: {exc.message}")
    return HTTPException(status_code=400, detail=exc.to_dict())


def check_horizon(name: str, months: float) -> None:
    """Reject horizons longer than the configured maximum."""
    max_months = get_settings().max_tenure_years * 12
    if months > max_months:
        raise InvalidInput(name, f"at most {max_months} months")
