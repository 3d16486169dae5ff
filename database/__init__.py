"""
Database package for the Coffee Kiosk Order Engine
Contains database connection and repository classes
"""

from .connection import DatabaseConnection
from .repository import ProductRepository, OrderRepository, DeviceStatusRepository, LatteArtRepository

__all__ = [
    'DatabaseConnection',
    'ProductRepository', 'OrderRepository', 'DeviceStatusRepository', 'LatteArtRepository'
]
