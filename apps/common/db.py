"""
Transaction boundary shared by every mutating ledger operation.
"""
import logging
from contextlib import contextmanager

from django.db import DatabaseError, OperationalError, transaction

from .exceptions import ConcurrencyConflict, PersistenceFailure

logger = logging.getLogger(__name__)

# MySQL lock wait timeout and deadlock
LOCK_ERROR_CODES = (1205, 1213)


def is_lock_error(exc):
    """True when the database gave up on a row lock rather than failing outright"""
    if exc.args and exc.args[0] in LOCK_ERROR_CODES:
        return True
    return 'locked' in str(exc).lower() or 'deadlock' in str(exc).lower()


@contextmanager
def ledger_transaction(operation, member_id=None):
    """
    Run one logical ledger operation in a single atomic unit.

    Database failures surface as ConcurrencyConflict or PersistenceFailure only
    after the atomic block has rolled back, so nothing partial is ever kept.
    """
    try:
        with transaction.atomic():
            yield
    except OperationalError as exc:
        if is_lock_error(exc):
            logger.warning(f"{operation} lost a lock race for member {member_id}: {exc}")
            raise ConcurrencyConflict(operation=operation, member_id=member_id) from exc
        logger.error(f"{operation} failed for member {member_id}: {exc}", exc_info=True)
        raise PersistenceFailure(operation=operation) from exc
    except DatabaseError as exc:
        logger.error(f"{operation} failed for member {member_id}: {exc}", exc_info=True)
        raise PersistenceFailure(operation=operation) from exc
