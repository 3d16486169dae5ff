"""
Core package for the Coffee Kiosk Order Engine
Contains main business logic and orchestration
"""

from .order_engine import KioskOrderEngine

__all__ = [
    'KioskOrderEngine'
]
