# sleeper_dash/routers/errors.py
import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from ..services.league_context import SeasonNotFoundError
from ..services.recap_llm import RecapGenerationError
from ..services.sleeper import SleeperAPIError

logger = logging.getLogger("sleeper_dash.api")

# Failures a route turns into an error response instead of a traceback
HANDLED_ERRORS = (SleeperAPIError, SeasonNotFoundError, RecapGenerationError, SQLAlchemyError, RuntimeError)


def api_error(exc: Exception) -> HTTPException:
    """404 when the message says "not found", 500 otherwise. Body is FastAPI's {"detail": ...}."""
    message = str(exc) or "Unknown error"
    status = 404 if "not found" in message else 500
    if status == 500:
        logger.error("request failed: %s", message, exc_info=exc)
    return HTTPException(status_code=status, detail=message)
