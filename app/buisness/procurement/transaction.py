from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.orm.exc import StaleDataError

from app import db
from app.buisness.procurement.errors import ProcurementError
from app.utils.logger import get_logger

logger = get_logger("procurement.buisness.transaction")


@contextmanager
def atomic(operation: str):
    """
    Run one lifecycle/ledger operation as a single transaction.

    Commits when the block completes; any exception rolls the whole session
    back so a rejected operation leaves every entity as it was.
    """
    try:
        yield db.session
        db.session.commit()
    except ProcurementError as e:
        db.session.rollback()
        logger.warning(
            f"{operation} rejected: [{e.code}] {e.message}",
            extra={"operation": operation, "error_code": e.code, "details": e.details},
        )
        raise
    except StaleDataError:
        db.session.rollback()
        logger.warning(f"{operation} lost a concurrent update race", extra={"operation": operation})
        raise
    except Exception:
        db.session.rollback()
        logger.exception(f"{operation} failed unexpectedly", extra={"operation": operation})
        raise
