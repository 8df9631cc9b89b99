"""
Loyalty error taxonomy and the DRF exception handler that renders it.

Every precondition failure raised by the ledger is a ``LoyaltyError``
subclass carrying a stable ``code`` that API clients branch on.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class LoyaltyError(Exception):
    """Base class for known, client-visible ledger failures"""
    code = 'LOYALTY_ERROR'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Loyalty operation failed'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details,
        }


class MemberNotFound(LoyaltyError):
    code = 'MEMBER_NOT_FOUND'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Member not found'

    def __init__(self, member_id, message=None):
        super().__init__(message or f'Member {member_id} not found', member_id=member_id)


class PrivilegeNotFound(LoyaltyError):
    code = 'PRIVILEGE_NOT_FOUND'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Privilege not found'

    def __init__(self, privilege_id):
        super().__init__(f'Privilege {privilege_id} not found', privilege_id=privilege_id)


class PrivilegeInactive(LoyaltyError):
    code = 'PRIVILEGE_INACTIVE'
    default_message = 'Privilege is not available for exchange'

    def __init__(self, privilege_id, name=None):
        label = f"'{name}'" if name else str(privilege_id)
        super().__init__(
            f'Privilege {label} is not available for exchange',
            privilege_id=privilege_id,
        )


class InvalidAmount(LoyaltyError):
    code = 'INVALID_AMOUNT'
    default_message = 'Point amount must be a positive integer'

    def __init__(self, amount, message=None):
        super().__init__(message or f'Invalid point amount: {amount}', amount=amount)


class InvalidExpiration(LoyaltyError):
    code = 'INVALID_EXPIRATION'
    default_message = 'Expiration days must be a positive integer'

    def __init__(self, days, message=None):
        super().__init__(message or f'Invalid expiration days: {days}', days=days)


class ValidationFailed(LoyaltyError):
    code = 'VALIDATION_ERROR'
    default_message = 'Validation error'

    def __init__(self, field, message):
        super().__init__(message, field=field)


class InsufficientBalance(LoyaltyError):
    """Deduction or exchange asked for more than the member can spend"""
    code = 'INSUFFICIENT_BALANCE'
    default_message = 'Insufficient points'

    def __init__(self, required, available, privilege_name=None):
        if privilege_name:
            message = (
                f"Insufficient points for privilege '{privilege_name}'. "
                f"Required: {required}, Available: {available}"
            )
        else:
            message = f'Insufficient points. Required: {required}, Available: {available}'
        super().__init__(
            message,
            required=required,
            available=available,
            deficit=required - available,
        )
        self.required = required
        self.available = available


class AlreadyOwned(LoyaltyError):
    code = 'ALREADY_OWNED'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Privilege already owned'

    def __init__(self, privilege_id, grant_id, name=None):
        label = f"'{name}'" if name else str(privilege_id)
        super().__init__(
            f'Member already holds an active grant of privilege {label}',
            privilege_id=privilege_id,
            grant_id=grant_id,
        )


class DuplicatePrivilege(LoyaltyError):
    code = 'DUPLICATE_PRIVILEGE'
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, name):
        super().__init__(f"Privilege with name '{name}' already exists", name=name)


class PrivilegeInUse(LoyaltyError):
    code = 'PRIVILEGE_IN_USE'
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, privilege_id, grant_count):
        super().__init__(
            f'Privilege {privilege_id} has {grant_count} grant(s) and cannot be deleted',
            privilege_id=privilege_id,
            grant_count=grant_count,
        )


class GrantNotFound(LoyaltyError):
    code = 'GRANT_NOT_FOUND'
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, grant_id):
        super().__init__(f'Privilege grant {grant_id} not found', grant_id=grant_id)


class GrantNotActive(LoyaltyError):
    code = 'GRANT_NOT_ACTIVE'

    def __init__(self, grant_id, grant_status):
        super().__init__(
            f'Privilege grant {grant_id} is {grant_status}',
            grant_id=grant_id,
            status=grant_status,
        )


class ConcurrencyConflict(LoyaltyError):
    """Another writer changed the member's ledger first; retry the whole operation"""
    code = 'CONCURRENCY_CONFLICT'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Concurrent update detected, please retry'


class PersistenceFailure(LoyaltyError):
    code = 'PERSISTENCE_FAILURE'
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Point store unavailable, nothing was applied'


class JobAlreadyRunning(LoyaltyError):
    code = 'JOB_ALREADY_RUNNING'
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, job_name):
        super().__init__(f"Job '{job_name}' is already running", job_name=job_name)


class UnknownJob(LoyaltyError):
    code = 'UNKNOWN_JOB'
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, job_name):
        super().__init__(f"Job '{job_name}' is not registered", job_name=job_name)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    if isinstance(exc, LoyaltyError):
        logger.warning(f"{exc.code}: {exc.message}")
        return Response({
            'code': exc.status_code,
            'msg': exc.message,
            'error': exc.code,
            'details': exc.details,
        }, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is None:
        # Unknown failure: keep the traceback in the logs, hide it from callers
        logger.error(f"Unhandled API exception: {exc}", exc_info=True)
        return Response({
            'code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'msg': 'Internal server error',
            'error': 'INTERNAL_ERROR',
            'details': {},
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"API Exception: {exc}")

    custom_response_data = {
        'code': response.status_code,
        'msg': 'An error occurred',
        'errors': response.data
    }

    # Handle specific error types
    if response.status_code == status.HTTP_400_BAD_REQUEST:
        custom_response_data['msg'] = 'Validation error'
    elif response.status_code == status.HTTP_401_UNAUTHORIZED:
        custom_response_data['msg'] = 'Authentication required'
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        custom_response_data['msg'] = 'Permission denied'
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        custom_response_data['msg'] = 'Resource not found'
    elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        custom_response_data['msg'] = 'Method not allowed'

    response.data = custom_response_data
    return response
