"""
Order status service - derives an order's status from its item statuses
"""
from typing import Dict, List, Any, Iterable, Tuple

from models.order import ItemStatus, OrderAggregateStatus, CancellationEligibility

_OWN_STATUS_MAP = {
    ItemStatus.QUEUED: OrderAggregateStatus.QUEUED,
    ItemStatus.PROCESSING: OrderAggregateStatus.PROCESSING,
    ItemStatus.COMPLETED: OrderAggregateStatus.COMPLETED,
    ItemStatus.CANCELLED: OrderAggregateStatus.CANCELLED,
}

ACTIVE_STATUSES = (OrderAggregateStatus.QUEUED, OrderAggregateStatus.PROCESSING)
HISTORICAL_STATUSES = (OrderAggregateStatus.COMPLETED, OrderAggregateStatus.CANCELLED)


class OrderStatusService:
    # 주문 아이템 상태들로부터 주문 전체 상태를 계산하는 서비스 클래스 (읽기 전용)

    def own_status(self, order_own_status: ItemStatus) -> OrderAggregateStatus:
        # 주문 자체 상태를 집계 상태로 변환 (미결제/결제완료는 대응 상태 없음)
        return _OWN_STATUS_MAP.get(order_own_status, OrderAggregateStatus.UNKNOWN)

    def aggregate_status(self, item_statuses: Iterable[ItemStatus],
                         order_own_status: ItemStatus) -> OrderAggregateStatus:
        # 우선순위: 전부 취소 > 전부 완료 > 하나라도 제조중 > 하나라도 대기중 > 주문 자체 상태
        statuses = list(item_statuses)

        if not statuses:
            return self.own_status(order_own_status)

        if all(status == ItemStatus.CANCELLED for status in statuses):
            return OrderAggregateStatus.CANCELLED

        if all(status == ItemStatus.COMPLETED for status in statuses):
            return OrderAggregateStatus.COMPLETED

        if any(status == ItemStatus.PROCESSING for status in statuses):
            return OrderAggregateStatus.PROCESSING

        if any(status == ItemStatus.QUEUED for status in statuses):
            return OrderAggregateStatus.QUEUED

        return self.own_status(order_own_status)

    def cancellation_eligibility(self, aggregate: OrderAggregateStatus) -> CancellationEligibility:
        # 대기중 = 일반 취소, 제조중 = 강제 취소 (재료 낭비 가능), 완료/취소 = 취소 불가
        if aggregate == OrderAggregateStatus.QUEUED:
            return CancellationEligibility(cancellable=True, force=False,
                                           message="Order is queued and can be cancelled.")
        if aggregate == OrderAggregateStatus.PROCESSING:
            return CancellationEligibility(
                cancellable=True, force=True,
                message="Order is being made by the machine. Force cancelling may interrupt "
                        "production and waste ingredients."
            )
        if aggregate in HISTORICAL_STATUSES:
            return CancellationEligibility(cancellable=False,
                                           message=f"Order is already {aggregate.value}.")
        return CancellationEligibility(cancellable=False,
                                       message="Order has not reached the machine queue.")

    def split_active_historical(self, orders: Iterable[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        # 대기중/제조중 주문은 활성, 완료/취소 주문은 이력으로 분류
        active, historical = [], []
        for order in orders:
            aggregate = self.aggregate_status(
                [ItemStatus.from_code(item["status"]) for item in order.get("items", [])],
                ItemStatus.from_code(order["status"])
            )
            if aggregate in ACTIVE_STATUSES:
                active.append(order)
            elif aggregate in HISTORICAL_STATUSES:
                historical.append(order)
        return active, historical
