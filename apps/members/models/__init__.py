"""
Member models module.
"""
from .member import Member

__all__ = [
    'Member',
]
