"""
Models package for the Coffee Kiosk Order Engine
Contains data models and type definitions
"""

from .product import (
    ProductType, ProductDefinition, CustomizationSelection, LatteArtChoice, LatteArtKind
)
from .ingredient import (
    IngredientDescriptor, IngredientLevel, MissingIngredient, AvailabilityVerdict,
    ProductAvailability, AvailabilitySummary
)
from .production_code import ProductionCodeDocument, TemplateParseResult, ProductionCodeLabel
from .order import (
    ItemStatus, OrderAggregateStatus, OrderLine, OrderItem, CancellationEligibility,
    CancellationOutcome, ItemCancellationOutcome, CancellationResult
)
from .errors import (
    KioskError, ProductNotFoundError, OrderNotFoundError, InvalidQuantityError, InvalidStatusError,
    InvalidSelectionError
)

__all__ = [
    'ProductType', 'ProductDefinition', 'CustomizationSelection', 'LatteArtChoice', 'LatteArtKind',
    'IngredientDescriptor', 'IngredientLevel', 'MissingIngredient', 'AvailabilityVerdict',
    'ProductAvailability', 'AvailabilitySummary',
    'ProductionCodeDocument', 'TemplateParseResult', 'ProductionCodeLabel',
    'ItemStatus', 'OrderAggregateStatus', 'OrderLine', 'OrderItem', 'CancellationEligibility',
    'CancellationOutcome', 'ItemCancellationOutcome', 'CancellationResult',
    'KioskError', 'ProductNotFoundError', 'OrderNotFoundError', 'InvalidQuantityError',
    'InvalidStatusError', 'InvalidSelectionError'
]
