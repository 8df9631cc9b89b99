"""
Registry of background jobs the runner can execute by name.
"""
from dataclasses import dataclass
from typing import Callable, Dict

from apps.common.exceptions import UnknownJob


@dataclass(frozen=True)
class JobDefinition:
    name: str
    func: Callable
    description: str = ''
    schedule: str = ''


_registry: Dict[str, JobDefinition] = {}


def register_job(name, description='', schedule=''):
    """
    Decorator registering ``func(trigger)`` under ``name``.

    The function returns a JSON-serializable summary of what it did.
    """
    def decorator(func):
        _registry[name] = JobDefinition(name=name, func=func, description=description, schedule=schedule)
        return func
    return decorator


def get_job(name) -> JobDefinition:
    try:
        return _registry[name]
    except KeyError:
        raise UnknownJob(name)


def registered_jobs():
    return sorted(_registry.values(), key=lambda job: job.name)
