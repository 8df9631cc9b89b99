"""
Audit sink for ledger and privilege events.

Writes are fire-and-forget: each one runs in its own savepoint and any
failure is logged and dropped, so an audit problem never undoes or fails
the operation it describes.
"""
import logging
import uuid

from django.db import transaction

from ..models import AuditLog, TransactionHistory

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')

POINT_KIND_ACTIONS = {
    'EARNED': ('POINT_ADD', 'POINT_EARNED'),
    'DEDUCTED': ('POINT_DEDUCT', 'POINT_DEDUCTED'),
    'EXPIRED': ('POINT_EXPIRE', 'POINT_EXPIRED'),
    'EXCHANGED': ('PRIVILEGE_EXCHANGE', 'POINT_EXCHANGED'),
}

PRIVILEGE_TRANSACTION_ACTIONS = {
    'PRIVILEGE_GRANTED': 'PRIVILEGE_GRANT',
    'PRIVILEGE_EXPIRED': 'PRIVILEGE_EXPIRE',
    'PRIVILEGE_REVOKED': 'PRIVILEGE_REVOKE',
    'PRIVILEGE_USED': 'PRIVILEGE_USE',
}


class AuditService:
    """Service for writing audit logs and transaction history"""

    @staticmethod
    def log_point_transaction(member_id, amount, description, balance_before, balance_after,
                              kind, batch_id=None, actor_type='SYSTEM', actor_id=None,
                              metadata=None, trace_id=None):
        """Record one balance-affecting event. Never raises."""
        trace_id = trace_id or uuid.uuid4().hex
        try:
            action, transaction_type = POINT_KIND_ACTIONS[kind]
            with transaction.atomic():
                AuditLog.objects.create(
                    entity_type='POINT',
                    entity_id=str(batch_id) if batch_id is not None else None,
                    action=action,
                    actor_type=actor_type,
                    actor_id=actor_id,
                    metadata={
                        'member_id': member_id,
                        'amount': amount,
                        'description': description,
                        'balance_before': balance_before,
                        'balance_after': balance_after,
                        **(metadata or {}),
                    },
                    trace_id=trace_id,
                )
                TransactionHistory.objects.create(
                    member_id=member_id,
                    transaction_type=transaction_type,
                    entity_type='POINT',
                    entity_id=str(batch_id) if batch_id is not None else None,
                    amount=amount,
                    description=description[:500],
                    balance_before=balance_before,
                    balance_after=balance_after,
                    metadata=metadata or {},
                )
        except Exception:
            logger.exception(
                f"Failed to write point audit for member {member_id} ({kind} {amount})"
            )
            return
        audit_logger.info(
            f"{action} member={member_id} amount={amount} "
            f"balance={balance_before}->{balance_after} actor={actor_type}:{actor_id} trace={trace_id}"
        )

    @staticmethod
    def log_privilege_transaction(member_id, privilege_id, privilege_name, transaction_type,
                                  point_cost=None, grant_id=None, actor_type='SYSTEM',
                                  actor_id=None, metadata=None, trace_id=None):
        """Record a grant lifecycle event. Never raises."""
        trace_id = trace_id or uuid.uuid4().hex
        try:
            action = PRIVILEGE_TRANSACTION_ACTIONS[transaction_type]
            details = {
                'member_id': member_id,
                'privilege_id': privilege_id,
                'privilege_name': privilege_name,
                'point_cost': point_cost,
                **(metadata or {}),
            }
            with transaction.atomic():
                AuditLog.objects.create(
                    entity_type='MEMBER_PRIVILEGE',
                    entity_id=str(grant_id) if grant_id is not None else None,
                    action=action,
                    actor_type=actor_type,
                    actor_id=actor_id,
                    metadata=details,
                    trace_id=trace_id,
                )
                TransactionHistory.objects.create(
                    member_id=member_id,
                    transaction_type=transaction_type,
                    entity_type='MEMBER_PRIVILEGE',
                    entity_id=str(grant_id) if grant_id is not None else None,
                    amount=point_cost,
                    description=f"{transaction_type.replace('_', ' ').title()}: {privilege_name}"[:500],
                    metadata=details,
                )
        except Exception:
            logger.exception(
                f"Failed to write privilege audit for member {member_id} "
                f"({transaction_type} {privilege_name})"
            )
            return
        audit_logger.info(
            f"{action} member={member_id} privilege={privilege_id} grant={grant_id} "
            f"actor={actor_type}:{actor_id} trace={trace_id}"
        )
