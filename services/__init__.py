"""
Services package for the Coffee Kiosk Order Engine
Contains business logic services
"""

from .ingredient_registry import IngredientRegistry
from .availability_service import AvailabilityService
from .production_code_service import ProductionCodeService
from .order_status_service import OrderStatusService
from .composition_service import CompositionService
from .product_service import ProductService
from .order_service import OrderService

__all__ = [
    'IngredientRegistry', 'AvailabilityService', 'ProductionCodeService', 'OrderStatusService',
    'CompositionService', 'ProductService', 'OrderService'
]
