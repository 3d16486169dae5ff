"""
Composition service - turns a product + selection + quantity into a ready-to-persist order line
"""
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from models.errors import InvalidQuantityError
from models.order import OrderLine
from models.product import (
    ProductDefinition, ProductType, CustomizationSelection, LatteArtChoice, LatteArtKind
)
from utils.logging import get_logger, log_event
from .availability_service import AvailabilityService
from .production_code_service import ProductionCodeService

logger = get_logger(__name__)

NO_OPTIONS = "NONE"

DesignPathLookup = Callable[[int], Optional[str]]


class CompositionService:
    # 주문 라인 생성 파사드 (가격, 생산 코드, 재료 목록, 옵션 요약)

    def __init__(self, availability_service: AvailabilityService,
                 production_code_service: ProductionCodeService,
                 design_path_lookup: Optional[DesignPathLookup] = None):
        # 재료/생산 코드 서비스와 라떼아트 이미지 경로 조회 함수 주입
        self.availability_service = availability_service
        self.production_code_service = production_code_service
        self.design_path_lookup = design_path_lookup

    def normalize_selection(self, product: ProductDefinition,
                            selection: CustomizationSelection) -> CustomizationSelection:
        # 범위를 벗어난 값은 제품 기본값으로 대체, 라떼아트 미지원 제품은 라떼아트 제거
        # 옵션이 하나도 없는 커피는 항상 기본 컵(CupCode "2")
        defaults = self.production_code_service.resolve_defaults(product)
        plain_coffee = product.type == ProductType.COFFEE and not product.has_any_options
        return replace(
            selection,
            bean_code=selection.bean_code if selection.bean_code in (1, 2) else defaults.bean_code,
            milk_code=selection.milk_code if selection.milk_code in (1, 2) else defaults.milk_code,
            ice=False if plain_coffee else selection.ice,
            shots=selection.shots if selection.shots in (1, 2) else defaults.shots,
            latte_art=selection.latte_art if product.has_latte_art else LatteArtChoice.none()
        )

    def build_option_summary(self, product: ProductDefinition, selection: CustomizationSelection) -> str:
        # 활성화된 옵션만 나열, 아무것도 없으면 "NONE"
        defaults = self.production_code_service.resolve_defaults(product)
        options: List[str] = []

        if product.has_bean_options:
            options.append(f"Bean{selection.bean_code}")

        if product.has_milk_options:
            options.append("Oat Milk" if selection.milk_code == 2 else "Regular Milk")

        if product.has_ice_options:
            options.append("Iced" if selection.ice else "Hot")
        elif selection.ice and not defaults.ice:
            options.append("Iced")

        if product.has_shot_options:
            options.append("Double Shot" if selection.is_double_shot else "Single Shot")
        elif selection.is_double_shot and defaults.shots != 2:
            options.append("Double Shot")

        if product.has_latte_art and selection.latte_art.is_selected:
            options.append("Custom Latte Art" if selection.latte_art.kind == LatteArtKind.CUSTOM else "Latte Art")

        return ", ".join(options) if options else NO_OPTIONS

    def resolve_image_path(self, latte_art: LatteArtChoice) -> str:
        # 라떼아트 이미지 경로 (선택 안 함 = 빈 문자열)
        if latte_art.kind == LatteArtKind.CUSTOM:
            return latte_art.image_path or ""
        if latte_art.kind == LatteArtKind.PREDEFINED:
            path = self.design_path_lookup(latte_art.design_id) if self.design_path_lookup else None
            if not path:
                log_event("composition.unknown_latte_art_design", {"design_id": latte_art.design_id},
                          level=logging.WARNING, log=logger)
            return path or ""
        return ""

    def compose_order_line(self, product: ProductDefinition, selection: CustomizationSelection,
                           quantity: int) -> OrderLine:
        # 제품 + 선택 옵션 + 수량 -> 저장 가능한 주문 라인
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantityError(quantity)

        selection = self.normalize_selection(product, selection)

        result = self.production_code_service.resolve_with_result(product, selection)
        unit_price = self.production_code_service.unit_price(product, selection)

        line = OrderLine(
            product_id=product.id,
            product_name=product.name,
            product_name_localized=product.name_localized,
            product_type=product.type.value,
            quantity=quantity,
            base_price=product.price,
            unit_price=unit_price,
            line_total=round(unit_price * quantity, 2),
            production_code=result.document.to_json(),
            required_ingredient_codes=list(product.required_ingredient_codes),
            ingredients=self.availability_service.ingredient_display_list(product.required_ingredient_codes),
            option_summary=self.build_option_summary(product, selection),
            image_path=self.resolve_image_path(selection.latte_art),
            template_warning=result.error
        )

        log_event("composition.order_line", {
            "product_id": product.id,
            "selection": selection,
            "quantity": quantity,
            "production_code": line.production_code,
            "line_total": line.line_total
        }, log=logger)

        return line
