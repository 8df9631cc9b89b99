"""
Access to the LOYALTY settings block with built-in defaults.
"""
from django.conf import settings

DEFAULTS = {
    'MIN_POINTS_PER_TRANSACTION': 1,
    'MAX_POINTS_PER_TRANSACTION': 10000,
    'DEFAULT_POINT_EXPIRATION_DAYS': None,
    'EXPIRING_SOON_DAYS': 7,
    'ENABLE_POINT_EXPIRATION': True,
    'ENABLE_PRIVILEGE_EXPIRATION': True,
    'JOB_MAX_RETRIES': 3,
    'JOB_RETRY_BASE_DELAY': 1.0,
    'JOB_RETRY_MAX_DELAY': 30.0,
    'JOB_EXECUTION_HISTORY': 100,
}


def loyalty_setting(name):
    """Return a LOYALTY setting, read on every call so override_settings works"""
    if name not in DEFAULTS:
        raise KeyError(f'Unknown loyalty setting: {name}')
    return getattr(settings, 'LOYALTY', {}).get(name, DEFAULTS[name])
