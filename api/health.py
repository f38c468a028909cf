import logging

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import storage

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check, including a store round trip
    ---
    tags:
      - Health
    responses:
      200:
        description: API and database are up
      503:
        description: Database unreachable
    """
    try:
        storage.get_session().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        storage.rollback()
        return {"status": "degraded", "database": "unreachable", "version": "1.0.0"}, 503
    return {"status": "ok", "database": "ok", "version": "1.0.0"}, 200
