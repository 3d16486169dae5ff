"""
Availability service - decides whether products can be sold from live ingredient readings
"""
import logging
from collections import Counter
from typing import Dict, List, Any, Optional, Iterable, Mapping

from models.ingredient import (
    AvailabilityVerdict, MissingIngredient, ProductAvailability, AvailabilitySummary, IngredientLevel,
    parse_ingredient_codes
)
from models.product import ProductDefinition
from utils.logging import get_logger, log_event
from .ingredient_registry import IngredientRegistry

logger = get_logger(__name__)

DEPLETED = 0
IN_STOCK = 1


def _to_number(value: Any) -> Optional[float]:
    # 센서 값은 숫자 또는 숫자 문자열로 들어옴
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class AvailabilityService:
    # 재료 센서 값으로 제품 판매 가능 여부를 판단하는 서비스 클래스 (순수 함수, 부작용 없음)

    def __init__(self, registry: IngredientRegistry):
        # IngredientRegistry 인스턴스 주입
        self.registry = registry

    def is_in_stock(self, code: str, value: Any) -> bool:
        # 0 = 소진, 1 = 재고 있음, 그 외 값은 경고 임계값 초과 시에만 재고 있음
        level = _to_number(value)
        if level is None:
            return False
        if level == DEPLETED:
            return False
        if level == IN_STOCK:
            return True
        return level > self.registry.warning_threshold(code)

    def resolve_availability(self, required_codes: Iterable[str],
                             live_readings: Mapping[str, Any]) -> AvailabilityVerdict:
        # 필요한 모든 재료가 재고 있음일 때만 판매 가능 (센서 값이 없는 재료는 판매 불가)
        codes = []
        for code in parse_ingredient_codes(required_codes):
            if code not in codes:
                codes.append(code)

        if not codes:
            return AvailabilityVerdict(available=True, reason="No ingredients required")

        missing = []
        for code in codes:
            value = live_readings.get(code)
            if not self.is_in_stock(code, value):
                missing.append(MissingIngredient(
                    code=code,
                    name=self.registry.display_name(code),
                    level=value
                ))
                if code not in self.registry:
                    log_event("availability.unknown_ingredient", {"code": code, "level": value},
                              level=logging.WARNING, log=logger)
                elif value is None:
                    log_event("availability.missing_reading", {"code": code},
                              level=logging.WARNING, log=logger)

        available = not missing
        reason = ("All ingredients available" if available
                  else "Missing ingredients: " + ", ".join(ing.name for ing in missing))

        log_event("availability.resolved", {
            "required": codes,
            "available": available,
            "missing": [ing.code for ing in missing]
        }, level=logging.DEBUG, log=logger)

        return AvailabilityVerdict(available=available, missing_ingredients=missing, reason=reason)

    def check_products(self, products: Iterable[ProductDefinition],
                       live_readings: Mapping[str, Any]) -> Dict[Any, ProductAvailability]:
        # 여러 제품의 판매 가능 여부를 제품 ID 기준으로 반환
        availability_map = {}
        for product in products:
            verdict = self.resolve_availability(product.required_ingredient_codes, live_readings)
            availability_map[product.id] = ProductAvailability(
                product_id=product.id,
                product_name=product.name,
                required_ingredient_codes=list(product.required_ingredient_codes),
                verdict=verdict
            )
        return availability_map

    def availability_summary(self, availability_map: Mapping[Any, ProductAvailability]) -> AvailabilitySummary:
        # 대시보드용 통계 (판매 가능 비율, 가장 많이 부족한 재료 상위 5개)
        total = len(availability_map)
        available = sum(1 for entry in availability_map.values() if entry.available)

        missing_counter: Counter = Counter()
        for entry in availability_map.values():
            if not entry.available:
                for ingredient in entry.verdict.missing_ingredients:
                    missing_counter[ingredient.code] += 1

        return AvailabilitySummary(
            total=total,
            available=available,
            unavailable=total - available,
            availability_rate=round(available / total * 100, 1) if total > 0 else 100.0,
            most_common_missing=[
                {"code": code, "affected_products": count}
                for code, count in missing_counter.most_common(5)
            ]
        )

    def ingredient_level(self, code: str, value: Any) -> IngredientLevel:
        # 관리자 화면용 재료 상태 등급
        ingredient = self.registry.get(code)
        level = _to_number(value)
        if not ingredient or level is None:
            return IngredientLevel.UNKNOWN
        if level == DEPLETED:
            return IngredientLevel.CRITICAL
        if level == IN_STOCK:
            return IngredientLevel.NORMAL
        if level <= ingredient.critical_level:
            return IngredientLevel.CRITICAL
        if level <= ingredient.warning_level:
            return IngredientLevel.WARNING
        return IngredientLevel.NORMAL

    def critical_ingredients(self, live_readings: Mapping[str, Any]) -> List[MissingIngredient]:
        # 값이 0(소진)으로 보고된 등록 재료 목록
        critical = []
        for code, value in live_readings.items():
            if code in self.registry and _to_number(value) == DEPLETED:
                critical.append(MissingIngredient(
                    code=code,
                    name=self.registry.display_name(code),
                    level=value
                ))
        return critical

    def ingredient_display_list(self, required_codes: Iterable[str]) -> List[Dict[str, str]]:
        # 재고와 무관한 표시용 재료 목록
        return [
            {
                "code": code,
                "name": self.registry.display_name(code),
                "name_localized": self.registry.display_name(code, localized=True),
                "full_name": self.registry.full_name(code)
            }
            for code in required_codes
        ]
