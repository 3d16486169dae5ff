"""
Ingredient and availability data models
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union, Iterable
from enum import Enum


class IngredientLevel(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class IngredientDescriptor:
    """Static metadata for one machine ingredient slot"""
    code: str
    display_name: str
    display_name_localized: str
    category: str
    warning_level: float = 20
    critical_level: float = 5

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "display_name": self.display_name,
            "display_name_localized": self.display_name_localized,
            "category": self.category,
            "warning_level": self.warning_level,
            "critical_level": self.critical_level
        }


@dataclass
class MissingIngredient:
    """Ingredient that blocks a product from being sold"""
    code: str
    name: str
    level: Optional[Union[int, float, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "name": self.name,
            "level": self.level
        }


@dataclass
class AvailabilityVerdict:
    """Availability of one product against a sensor snapshot"""
    available: bool
    missing_ingredients: List[MissingIngredient] = field(default_factory=list)
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "available": self.available,
            "missing_ingredients": [ing.to_dict() for ing in self.missing_ingredients],
            "reason": self.reason
        }


@dataclass
class ProductAvailability:
    """Availability verdict annotated with the product it belongs to"""
    product_id: Any
    product_name: str
    required_ingredient_codes: List[str]
    verdict: AvailabilityVerdict

    @property
    def available(self) -> bool:
        return self.verdict.available

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self.verdict.to_dict()
        data.update({
            "product_id": self.product_id,
            "product_name": self.product_name,
            "required_ingredient_codes": list(self.required_ingredient_codes)
        })
        return data


@dataclass
class AvailabilitySummary:
    """Dashboard statistics over a set of product availabilities"""
    total: int
    available: int
    unavailable: int
    availability_rate: float
    most_common_missing: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "total": self.total,
            "available": self.available,
            "unavailable": self.unavailable,
            "availability_rate": self.availability_rate,
            "most_common_missing": list(self.most_common_missing)
        }


def parse_ingredient_codes(raw: Union[str, Iterable[str], None]) -> List[str]:
    """Split the stored "CoffeeMatter1,CoffeeMatter2" form (or a list) into codes."""
    if not raw:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [str(code).strip() for code in parts if str(code).strip()]
