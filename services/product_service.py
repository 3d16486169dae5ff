"""
Product service - handles product configuration and menu availability
"""
from typing import Dict, List, Any, Mapping, Optional

from models.product import ProductDefinition
from database.repository import ProductRepository
from .availability_service import AvailabilityService
from .production_code_service import ProductionCodeService, parse_template, CLASS_CODE


class ProductService:
    # 제품 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, product_repository: ProductRepository, availability_service: AvailabilityService,
                 production_code_service: ProductionCodeService):
        # ProductRepository 인스턴스를 주입받아 데이터 접근 계층과 연결
        self.product_repo = product_repository
        self.availability_service = availability_service
        self.production_code_service = production_code_service

    def validate_product(self, product: ProductDefinition) -> List[str]:
        # 저장 시점에 데이터 품질 문제를 경고로 반환
        warnings = []

        parsed = parse_template(product.production_code_template)
        if not parsed.success:
            warnings.append(f"Production code template is malformed: {parsed.error}")

        if CLASS_CODE not in parsed.document:
            # variant만으로는 기본(핫/싱글) 선택을 커버할 수 없음
            warnings.append(
                "Production code template has no classCode; orders without a matching "
                "variant will be sent to the machine without a class code."
            )

        registry = self.availability_service.registry
        unknown = [code for code in product.required_ingredient_codes if code not in registry]
        if unknown:
            warnings.append(f"Unknown ingredient codes: {', '.join(unknown)}")

        if product.price < 0:
            warnings.append("Price is negative.")

        return warnings

    def save_product(self, product: ProductDefinition) -> Dict[str, Any]:
        # 제품 저장 (경고는 함께 반환하되 저장은 막지 않음)
        warnings = self.validate_product(product)

        if not self.product_repo.save_product(product):
            return {
                "success": False,
                "error": f"Failed to save product {product.id}."
            }

        return {
            "success": True,
            "product_id": product.id,
            "warnings": warnings
        }

    def get_product(self, product_id: str) -> Optional[ProductDefinition]:
        # 제품 ID로 특정 제품 조회
        return self.product_repo.get_product_by_id(product_id)

    def get_menu(self, live_readings: Mapping[str, Any], category: Optional[str] = None) -> Dict[str, Any]:
        # 제품 목록에 실시간 판매 가능 여부를 붙여서 반환
        products = self.product_repo.list_products(category)
        availability_map = self.availability_service.check_products(products, live_readings)
        summary = self.availability_service.availability_summary(availability_map)

        menu = []
        for product in products:
            verdict = availability_map[product.id].verdict
            entry = product.to_dict()
            entry.update({
                "available": verdict.available,
                "missing_ingredients": [ing.to_dict() for ing in verdict.missing_ingredients],
                "availability_reason": verdict.reason,
                "defaults": self.production_code_service.resolve_defaults(product).to_dict()
            })
            menu.append(entry)

        return {
            "success": True,
            "products": menu,
            "availability": summary.to_dict(),
            "ingredient_levels_checked": bool(live_readings)
        }
