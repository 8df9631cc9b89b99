"""
Background jobs wired to the ledger.
"""
import logging

from apps.common.conf import loyalty_setting
from apps.points.services import ExpirationSweeper
from apps.privileges.services import PrivilegeService
from .registry import register_job

logger = logging.getLogger(__name__)


@register_job('point-expiration', description='Expire overdue point batches', schedule='0 0 * * *')
def expire_points(trigger='manual'):
    if trigger == 'scheduled' and not loyalty_setting('ENABLE_POINT_EXPIRATION'):
        logger.info('Point expiration is disabled; skipping scheduled run')
        return {'skipped': True}
    result = ExpirationSweeper.sweep()
    if result.errors:
        logger.warning(f"Point expiration finished with {len(result.errors)} batch error(s)")
    return result.to_dict()


@register_job('privilege-expiration', description='Expire overdue privilege grants', schedule='0 0 * * *')
def expire_privileges(trigger='manual'):
    if trigger == 'scheduled' and not loyalty_setting('ENABLE_PRIVILEGE_EXPIRATION'):
        logger.info('Privilege expiration is disabled; skipping scheduled run')
        return {'skipped': True}
    return PrivilegeService.process_expired_grants()


@register_job('expiring-points-check', description='Report points expiring soon', schedule='0 9 * * *')
def check_expiring_points(trigger='manual'):
    days = loyalty_setting('EXPIRING_SOON_DAYS')
    summary = ExpirationSweeper.summarize_expiring(days)
    for member_id, entry in summary.items():
        logger.info(
            f"Member {member_id} has {entry['points']} points in {entry['batches']} batch(es) "
            f"expiring by {entry['earliest_expiry'].isoformat()}"
        )
    return {
        'days': days,
        'members': len(summary),
        'total_points': sum(entry['points'] for entry in summary.values()),
    }
