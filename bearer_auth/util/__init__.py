# bearer_auth/util/__init__.py
from .clock import Clock, SystemClock
from .id_generator import IDGenerator, SecureRandomIDGenerator

__all__ = [
    "Clock",
    "SystemClock",
    "IDGenerator",
    "SecureRandomIDGenerator",
]
