"""
Order related data models
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

from .errors import InvalidStatusError


class ItemStatus(Enum):
    CANCELLED = -1
    UNPAID = 1
    PAID = 2
    QUEUED = 3
    PROCESSING = 4
    COMPLETED = 5

    @classmethod
    def from_code(cls, value: Any) -> "ItemStatus":
        """Decode a wire status code or name; legacy code 0 means cancelled"""
        if isinstance(value, ItemStatus):
            return value
        if isinstance(value, str) and not value.strip().lstrip("-").isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidStatusError(value)
        try:
            code = int(value)
        except (TypeError, ValueError):
            raise InvalidStatusError(value)
        if code == 0:
            return cls.CANCELLED
        try:
            return cls(code)
        except ValueError:
            raise InvalidStatusError(value)

    @property
    def display_name(self) -> str:
        return _ITEM_STATUS_NAMES[self]


_ITEM_STATUS_NAMES = {
    ItemStatus.CANCELLED: "Cancelled",
    ItemStatus.UNPAID: "Unpaid",
    ItemStatus.PAID: "Paid",
    ItemStatus.QUEUED: "Queuing",
    ItemStatus.PROCESSING: "Processing",
    ItemStatus.COMPLETED: "Completed",
}


class OrderAggregateStatus(Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class CancellationOutcome(Enum):
    CANCELLED = "cancelled"
    PARTIALLY_CANCELLED = "partially_cancelled"
    NOT_CANCELLED = "not_cancelled"


@dataclass
class OrderLine:
    """Ready-to-persist order line produced by the composition facade"""
    product_id: Any
    product_name: str
    product_name_localized: str
    product_type: int
    quantity: int
    base_price: float
    unit_price: float
    line_total: float
    production_code: str
    required_ingredient_codes: List[str]
    ingredients: List[Dict[str, str]]
    option_summary: str
    image_path: str = ""
    template_warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_name_localized": self.product_name_localized,
            "product_type": self.product_type,
            "quantity": self.quantity,
            "base_price": self.base_price,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
            "production_code": self.production_code,
            "required_ingredient_codes": ",".join(self.required_ingredient_codes),
            "ingredients": list(self.ingredients),
            "option_summary": self.option_summary,
            "image_path": self.image_path,
            "template_warning": self.template_warning
        }


@dataclass
class OrderItem:
    """Persisted order line with its machine status"""
    order_item_id: str
    order_id: str
    line: OrderLine
    status: ItemStatus = ItemStatus.QUEUED
    is_test: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = self.line.to_dict()
        data.update({
            "order_item_id": self.order_item_id,
            "order_id": self.order_id,
            "status": self.status.value,
            "status_name": self.status.display_name,
            "is_test": self.is_test
        })
        return data


@dataclass
class CancellationEligibility:
    """Whether and how an order may be cancelled"""
    cancellable: bool
    force: bool = False
    message: str = ""

    @property
    def requires_strong_confirmation(self) -> bool:
        return self.force

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "cancellable": self.cancellable,
            "force": self.force,
            "requires_strong_confirmation": self.requires_strong_confirmation,
            "message": self.message
        }


@dataclass
class ItemCancellationOutcome:
    """Result of cancelling one order item"""
    order_item_id: str
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "order_item_id": self.order_item_id,
            "success": self.success,
            "error": self.error
        }


@dataclass
class CancellationResult:
    """Per-item report of an order cancellation"""
    order_id: str
    force: bool
    items: List[ItemCancellationOutcome] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def outcome(self) -> CancellationOutcome:
        if self.error is not None:
            return CancellationOutcome.NOT_CANCELLED
        succeeded = [item for item in self.items if item.success]
        # 아이템이 없는 주문은 주문 자체 상태만 취소됨
        if len(succeeded) == len(self.items):
            return CancellationOutcome.CANCELLED
        if succeeded:
            return CancellationOutcome.PARTIALLY_CANCELLED
        return CancellationOutcome.NOT_CANCELLED

    def failed_item_ids(self) -> List[str]:
        return [item.order_item_id for item in self.items if not item.success]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "order_id": self.order_id,
            "force": self.force,
            "outcome": self.outcome.value,
            "items": [item.to_dict() for item in self.items],
            "failed_item_ids": self.failed_item_ids(),
            "error": self.error
        }
