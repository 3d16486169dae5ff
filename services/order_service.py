"""
Order service - handles order placement, status tracking and cancellation
"""
import uuid
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any, Mapping

from models.errors import KioskError, ProductNotFoundError, OrderNotFoundError, InvalidSelectionError
from models.order import (
    ItemStatus, OrderAggregateStatus, OrderItem, CancellationResult, ItemCancellationOutcome
)
from models.product import CustomizationSelection, parse_bool
from models.production_code import ProductionCodeDocument
from database.repository import OrderRepository, ProductRepository
from utils.logging import get_logger, log_event
from .availability_service import AvailabilityService
from .composition_service import CompositionService
from .order_status_service import OrderStatusService
from .production_code_service import ProductionCodeService, parse_template

logger = get_logger(__name__)

_AGGREGATE_TO_ITEM_STATUS = {
    OrderAggregateStatus.QUEUED: ItemStatus.QUEUED,
    OrderAggregateStatus.PROCESSING: ItemStatus.PROCESSING,
    OrderAggregateStatus.COMPLETED: ItemStatus.COMPLETED,
    OrderAggregateStatus.CANCELLED: ItemStatus.CANCELLED,
}


def generate_order_num() -> str:
    # 주문 번호 생성 (날짜시간 기반 + 충돌 방지용 접미사)
    return f"ORD_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:4].upper()}"


class OrderService:
    # 주문 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, order_repository: OrderRepository, product_repository: ProductRepository,
                 composition_service: CompositionService, availability_service: AvailabilityService,
                 status_service: OrderStatusService, production_code_service: ProductionCodeService,
                 device_id: int = 1):
        # 리포지토리와 서비스 인스턴스 주입
        self.order_repo = order_repository
        self.product_repo = product_repository
        self.composition_service = composition_service
        self.availability_service = availability_service
        self.status_service = status_service
        self.production_code_service = production_code_service
        self.device_id = device_id

    def compose_order_line(self, product_id: str, selection: Optional[Dict[str, Any]] = None,
                           quantity: int = 1) -> Dict[str, Any]:
        # 주문 라인 미리보기 (저장하지 않음)
        try:
            product = self.product_repo.get_product_by_id(product_id)
            if not product:
                raise ProductNotFoundError(product_id)

            defaults = self.production_code_service.resolve_defaults(product)
            customization = CustomizationSelection.from_dict(selection, defaults)
            line = self.composition_service.compose_order_line(product, customization, quantity)

            return {
                "success": True,
                "order_line": line.to_dict()
            }

        except (KioskError, ValueError, KeyError) as e:
            return {
                "success": False,
                "error": str(e)
            }

    def place_order(self, items: List[Dict[str, Any]], live_readings: Mapping[str, Any],
                    order_num: Optional[str] = None) -> Dict[str, Any]:
        # 주문 라인들을 생성하고 머신 대기열(Queuing) 상태로 저장
        if not items:
            return {
                "success": False,
                "error": "Order has no items."
            }
        if not isinstance(items, list):
            return {
                "success": False,
                "error": "Order items must be a list."
            }

        try:
            composed = []
            for position, request_item in enumerate(items):
                if not isinstance(request_item, dict):
                    raise InvalidSelectionError(f"Order item {position + 1} must be an object")
                product_id = request_item.get("product_id")
                product = self.product_repo.get_product_by_id(product_id)
                if not product:
                    raise ProductNotFoundError(product_id)

                # 센서 값이 없는 재료는 소진으로 취급 (센서 보고 전에는 주문 불가)
                verdict = self.availability_service.resolve_availability(
                    product.required_ingredient_codes, live_readings
                )
                if not verdict.available:
                    return {
                        "success": False,
                        "error": f"{product.name} is unavailable. {verdict.reason}",
                        "product_id": product.id,
                        "missing_ingredients": [ing.to_dict() for ing in verdict.missing_ingredients]
                    }

                defaults = self.production_code_service.resolve_defaults(product)
                selection = CustomizationSelection.from_dict(request_item.get("selection"), defaults)
                line = self.composition_service.compose_order_line(
                    product, selection, request_item.get("quantity", 1)
                )
                composed.append((line, parse_bool(request_item.get("is_test"), False, "is_test")))

        except (KioskError, ValueError, KeyError) as e:
            return {
                "success": False,
                "error": str(e)
            }

        order_id = str(uuid.uuid4())
        order_num = order_num or generate_order_num()
        total_amount = round(sum(line.line_total for line, _ in composed), 2)

        # 주문과 아이템을 한 번에 저장 (부분 저장된 주문이 대기열에 남지 않음)
        order_items = [
            OrderItem(
                order_item_id=str(uuid.uuid4()),
                order_id=order_id,
                line=line,
                status=ItemStatus.QUEUED,
                is_test=is_test
            )
            for line, is_test in composed
        ]
        if not self.order_repo.create_order_with_items(order_id, order_num, self.device_id,
                                                       total_amount, order_items):
            return {
                "success": False,
                "error": f"Failed to save order {order_num}; nothing was queued."
            }

        log_event("order.placed", {
            "order_id": order_id,
            "order_num": order_num,
            "items": len(composed),
            "total_amount": total_amount
        }, log=logger)

        return {
            "success": True,
            "order_id": order_id,
            "order_num": order_num,
            "status": ItemStatus.QUEUED.value,
            "status_name": ItemStatus.QUEUED.display_name,
            "total_amount": total_amount,
            "item_count": len(composed)
        }

    def get_order_status(self, order_id: str) -> Dict[str, Any]:
        # 아이템 상태로부터 주문 상태와 취소 가능 여부 계산
        details = self.order_repo.get_order_details(order_id)
        if not details:
            return {
                "success": False,
                "error": str(OrderNotFoundError(order_id))
            }

        items = details["order_items"]
        own_status = ItemStatus.from_code(details["order_info"]["status"])
        aggregate = self.status_service.aggregate_status(
            [ItemStatus.from_code(item["status"]) for item in items], own_status
        )
        eligibility = self.status_service.cancellation_eligibility(aggregate)

        for item in items:
            parsed = parse_template(item.get("production_code"))
            document = parsed.document if parsed.success else ProductionCodeDocument()
            item["production_code_labels"] = [
                label.to_dict() for label in self.production_code_service.describe_production_codes(document)
            ]

        return {
            "success": True,
            "order_info": details["order_info"],
            "order_items": items,
            "aggregate_status": aggregate.value,
            "cancellation": eligibility.to_dict()
        }

    def refresh_order_status(self, order_id: str) -> OrderAggregateStatus:
        # 주문 자체 상태를 아이템 상태에서 다시 계산하여 저장
        own_status = self.order_repo.get_order_own_status(order_id)
        if own_status is None:
            raise OrderNotFoundError(order_id)

        statuses = [status for _, status in self.order_repo.get_item_statuses(order_id)]
        aggregate = self.status_service.aggregate_status(statuses, own_status)

        derived = _AGGREGATE_TO_ITEM_STATUS.get(aggregate)
        if derived is not None and derived != own_status:
            self.order_repo.update_order_status(order_id, derived)
        return aggregate

    def update_item_status(self, order_item_id: str, status: Any) -> Dict[str, Any]:
        # 머신/직원이 보낸 아이템 상태 변경 반영
        try:
            new_status = ItemStatus.from_code(status)
        except KioskError as e:
            return {
                "success": False,
                "error": str(e)
            }

        order_id = self.order_repo.get_order_id_for_item(order_item_id)
        if not order_id:
            return {
                "success": False,
                "error": f"Order item {order_item_id} not found"
            }

        if not self.order_repo.update_item_status(order_item_id, new_status):
            return {
                "success": False,
                "error": f"Failed to update order item {order_item_id}"
            }

        aggregate = self.refresh_order_status(order_id)

        log_event("order.item_status", {
            "order_id": order_id,
            "order_item_id": order_item_id,
            "status": new_status.name,
            "aggregate": aggregate.value
        }, log=logger)

        return {
            "success": True,
            "order_id": order_id,
            "order_item_id": order_item_id,
            "status": new_status.value,
            "status_name": new_status.display_name,
            "aggregate_status": aggregate.value
        }

    def cancel_order(self, order_id: str, confirm_force: bool = False) -> CancellationResult:
        # 주문의 각 아이템을 개별적으로 취소 상태로 변경 (부분 실패는 아이템별로 보고)
        own_status = self.order_repo.get_order_own_status(order_id)
        if own_status is None:
            return CancellationResult(order_id=order_id, force=False, error=str(OrderNotFoundError(order_id)))

        item_statuses = self.order_repo.get_item_statuses(order_id)
        aggregate = self.status_service.aggregate_status([status for _, status in item_statuses], own_status)
        eligibility = self.status_service.cancellation_eligibility(aggregate)

        if not eligibility.cancellable:
            return CancellationResult(order_id=order_id, force=False, error=eligibility.message)

        if eligibility.force and not confirm_force:
            return CancellationResult(
                order_id=order_id, force=True,
                error="Order is processing; force cancel must be confirmed. " + eligibility.message
            )

        result = CancellationResult(order_id=order_id, force=eligibility.force)
        for order_item_id, status in item_statuses:
            if status == ItemStatus.CANCELLED:
                continue
            if self.order_repo.update_item_status(order_item_id, ItemStatus.CANCELLED):
                result.items.append(ItemCancellationOutcome(order_item_id=order_item_id, success=True))
            else:
                result.items.append(ItemCancellationOutcome(
                    order_item_id=order_item_id, success=False,
                    error=f"Failed to cancel item {order_item_id}"
                ))

        if not item_statuses:
            self.order_repo.update_order_status(order_id, ItemStatus.CANCELLED)
        else:
            self.refresh_order_status(order_id)

        log_event("order.cancelled", result.to_dict(),
                  level=logging.WARNING if result.failed_item_ids() else logging.INFO, log=logger)

        return result

    def list_orders(self, limit: int = 100) -> Dict[str, Any]:
        # 활성 주문(대기/제조중)과 이력(완료/취소) 분리
        orders = self.order_repo.list_orders(limit)
        for order in orders:
            order["aggregate_status"] = self.status_service.aggregate_status(
                [ItemStatus.from_code(item["status"]) for item in order["items"]],
                ItemStatus.from_code(order["status"])
            ).value

        active, historical = self.status_service.split_active_historical(orders)
        return {
            "success": True,
            "active": active,
            "historical": historical
        }
