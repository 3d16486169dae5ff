"""
Main KioskOrderEngine class - orchestrates all services
"""
from typing import Dict, List, Any, Optional

from config import settings
from database.connection import DatabaseConnection
from database.repository import (
    ProductRepository, OrderRepository, DeviceStatusRepository, LatteArtRepository
)
from models.product import ProductDefinition
from services.ingredient_registry import IngredientRegistry
from services.availability_service import AvailabilityService
from services.production_code_service import ProductionCodeService
from services.order_status_service import OrderStatusService
from services.composition_service import CompositionService
from services.product_service import ProductService
from services.order_service import OrderService


class KioskOrderEngine:
    # 메인 주문 엔진 클래스 - 모든 서비스를 조율하는 중앙 관리자

    def __init__(self, db_path: Optional[str] = None, device_id: Optional[int] = None):
        # 데이터베이스 연결 초기화
        self.db_connection = DatabaseConnection(db_path or settings.db_path)
        self.device_id = device_id if device_id is not None else settings.device_id

        # 리포지토리 레이어 초기화 (데이터 접근 계층)
        self.product_repo = ProductRepository(self.db_connection)
        self.order_repo = OrderRepository(self.db_connection)
        self.device_repo = DeviceStatusRepository(self.db_connection)
        self.latte_art_repo = LatteArtRepository(self.db_connection)

        # 서비스 레이어 초기화 (비즈니스 로직 계층)
        self.registry = IngredientRegistry(default_warning_level=settings.default_warning_level)
        self.availability_service = AvailabilityService(self.registry)
        self.production_code_service = ProductionCodeService(settings.double_shot_surcharge)
        self.status_service = OrderStatusService()
        self.composition_service = CompositionService(
            self.availability_service, self.production_code_service, self.latte_art_repo.get_design_path
        )
        self.product_service = ProductService(
            self.product_repo, self.availability_service, self.production_code_service
        )
        self.order_service = OrderService(
            self.order_repo, self.product_repo, self.composition_service, self.availability_service,
            self.status_service, self.production_code_service, self.device_id
        )

    # === 장치 상태 관련 메서드들 ===
    def record_device_status(self, readings: Dict[str, Any]) -> Dict[str, Any]:
        # 머신이 보고한 재료 센서 값 저장
        if not isinstance(readings, dict):
            return {
                "success": False,
                "error": "Readings must be an object of ingredient code -> value."
            }
        if not self.device_repo.save_readings(self.device_id, readings):
            return {
                "success": False,
                "error": "Failed to save device status."
            }
        critical = self.availability_service.critical_ingredients(readings)
        return {
            "success": True,
            "critical_ingredients": [ing.to_dict() for ing in critical]
        }

    def get_live_readings(self) -> Dict[str, Any]:
        # 최신 센서 값 조회
        return self.device_repo.get_latest_readings(self.device_id)

    # === 제품 관련 메서드들 ===
    def save_product(self, product: ProductDefinition) -> Dict[str, Any]:
        # 제품 저장 + 설정 경고 반환
        return self.product_service.save_product(product)

    def get_menu(self, category: Optional[str] = None) -> Dict[str, Any]:
        # 실시간 판매 가능 여부가 포함된 메뉴
        return self.product_service.get_menu(self.get_live_readings(), category)

    def get_availability_summary(self) -> Dict[str, Any]:
        # 제품 판매 가능 통계
        return self.get_menu()["availability"]

    # === 주문 관련 메서드들 ===
    def compose_order_line(self, product_id: str, selection: Optional[Dict[str, Any]] = None,
                           quantity: int = 1) -> Dict[str, Any]:
        # 주문 라인 미리보기 (가격, 생산 코드, 옵션 요약)
        return self.order_service.compose_order_line(product_id, selection, quantity)

    def place_order(self, items: List[Dict[str, Any]], order_num: Optional[str] = None) -> Dict[str, Any]:
        # 주문 생성 후 머신 대기열에 등록
        return self.order_service.place_order(items, self.get_live_readings(), order_num)

    def get_order_status(self, order_id: str) -> Dict[str, Any]:
        # 주문 전체 상태, 아이템 상태, 취소 가능 여부 조회
        return self.order_service.get_order_status(order_id)

    def update_item_status(self, order_item_id: str, status: Any) -> Dict[str, Any]:
        # 머신 콜백: 아이템 상태 변경
        return self.order_service.update_item_status(order_item_id, status)

    def cancel_order(self, order_id: str, confirm_force: bool = False) -> Dict[str, Any]:
        # 주문 취소 (아이템별 결과 포함)
        result = self.order_service.cancel_order(order_id, confirm_force)
        response = result.to_dict()
        response["success"] = result.error is None and not result.failed_item_ids()
        return response

    def list_orders(self, limit: int = 100) -> Dict[str, Any]:
        # 활성 주문과 이력 주문 목록
        return self.order_service.list_orders(limit)
