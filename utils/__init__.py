"""
Utility package for the Coffee Kiosk Order Engine
"""

from .logging import get_logger, log_event

__all__ = [
    'get_logger', 'log_event'
]
