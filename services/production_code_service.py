"""
Production code service - resolves a product and a customer selection into machine codes
"""
import json
import logging
from typing import Any, List

from models.product import ProductDefinition, CustomizationSelection, LatteArtChoice
from models.production_code import ProductionCodeDocument, TemplateParseResult, ProductionCodeLabel
from utils.logging import get_logger, log_event

logger = get_logger(__name__)

CLASS_CODE = "classCode"
BEAN_CODE = "BeanCode"
MILK_CODE = "MilkCode"
CUP_CODE = "CupCode"
ICE_CODE = "IceCode"
SHOT_CODE = "ShotCode"

CUP_CODE_HOT = "2"
CUP_CODE_ICED = "3"

DOUBLE_SHOT_SURCHARGE = 0.5

PRIMARY_CODE_ORDER = [CLASS_CODE, CUP_CODE, BEAN_CODE, MILK_CODE]
CUP_SIZES = {"1": "Small", "2": "Medium", "3": "Large"}
BEAN_TYPES = {"1": "House Blend", "2": "Premium"}
MILK_TYPES = {"1": "Regular", "2": "Oat Milk"}


def parse_template(raw: Any) -> TemplateParseResult:
    """Parse a stored template into a document.

    Never raises: a malformed template yields success=False with an empty
    document and an error describing the problem.
    """
    if isinstance(raw, ProductionCodeDocument):
        return TemplateParseResult(success=True, document=raw.copy())
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return TemplateParseResult(success=True)

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            return TemplateParseResult(success=False, error=f"Invalid template JSON: {e}")

    if not isinstance(raw, list):
        return TemplateParseResult(
            success=False, error=f"Template must be a list of single-key objects, got {type(raw).__name__}"
        )

    document = ProductionCodeDocument()
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict) or len(entry) != 1:
            return TemplateParseResult(
                success=False, error=f"Template entry {position} is not a single-key object: {entry!r}"
            )
        key, value = next(iter(entry.items()))
        if value is None or isinstance(value, (dict, list)):
            return TemplateParseResult(
                success=False, error=f"Template entry {position} has a non-scalar value for {key!r}"
            )
        document.upsert(str(key), value)

    return TemplateParseResult(success=True, document=document)


class ProductionCodeService:
    # 제품 설정 + 고객 선택 옵션 -> 커피 머신 생산 코드 문서 변환 서비스

    def __init__(self, double_shot_surcharge: float = DOUBLE_SHOT_SURCHARGE):
        self.double_shot_surcharge = double_shot_surcharge

    def resolve_defaults(self, product: ProductDefinition) -> CustomizationSelection:
        # 제품이 권장하는 기본 선택 옵션
        return CustomizationSelection(
            bean_code=product.default_bean_code if product.default_bean_code in (1, 2) else 1,
            milk_code=product.default_milk_code if product.default_milk_code in (1, 2) else 1,
            ice=bool(product.default_ice),
            shots=product.default_shots if product.default_shots in (1, 2) else 1,
            latte_art=LatteArtChoice.none()
        )

    def select_class_code(self, product: ProductDefinition, selection: CustomizationSelection,
                          template: ProductionCodeDocument):
        # variant 우선순위: 아이스+더블 > 아이스 > 더블 > 템플릿 classCode
        if selection.ice and selection.is_double_shot and product.iced_and_double_class_code:
            return product.iced_and_double_class_code
        if selection.ice and product.iced_class_code:
            return product.iced_class_code
        if selection.is_double_shot and product.double_shot_class_code:
            return product.double_shot_class_code
        return template.get(CLASS_CODE)

    def uses_variant_for_ice(self, product: ProductDefinition, selection: CustomizationSelection) -> bool:
        return bool(
            (selection.ice and product.iced_class_code)
            or (selection.ice and selection.is_double_shot and product.iced_and_double_class_code)
        )

    def uses_variant_for_shots(self, product: ProductDefinition, selection: CustomizationSelection) -> bool:
        return bool(
            (selection.is_double_shot and product.double_shot_class_code)
            or (selection.ice and selection.is_double_shot and product.iced_and_double_class_code)
        )

    def apply_selection(self, product: ProductDefinition, selection: CustomizationSelection,
                        template: ProductionCodeDocument) -> ProductionCodeDocument:
        """Apply the customization rules to an already parsed template."""
        document = template.copy()

        class_code = self.select_class_code(product, selection, template)
        if class_code:
            document.upsert_first(CLASS_CODE, class_code)

        # BeanCode / MilkCode: 템플릿에 있으면 덮어쓰고, 없으면 옵션이 켜진 경우에만 추가
        if BEAN_CODE in document or product.has_bean_options:
            document.upsert(BEAN_CODE, selection.bean_code)
        if MILK_CODE in document or product.has_milk_options:
            document.upsert(MILK_CODE, selection.milk_code)

        # 컵 코드는 아이스 옵션 여부와 관계없이 항상 설정
        document.upsert(CUP_CODE, CUP_CODE_ICED if selection.ice else CUP_CODE_HOT)

        # variant classCode가 이미 아이스/샷을 표현하면 별도 코드를 보내지 않음
        if self.uses_variant_for_ice(product, selection):
            document.remove(ICE_CODE)
        elif product.has_ice_options:
            document.upsert(ICE_CODE, "1" if selection.ice else "0")

        if self.uses_variant_for_shots(product, selection):
            document.remove(SHOT_CODE)
        elif product.has_shot_options:
            document.upsert(SHOT_CODE, selection.shots)

        return document

    def resolve_with_result(self, product: ProductDefinition,
                            selection: CustomizationSelection) -> TemplateParseResult:
        # 템플릿 파싱 실패 여부를 유지한 채 생산 코드 문서 생성
        parsed = parse_template(product.production_code_template)
        if not parsed.success:
            log_event("production_code.malformed_template", {
                "product_id": product.id,
                "error": parsed.error
            }, level=logging.WARNING, log=logger)
        document = self.apply_selection(product, selection, parsed.document)
        return TemplateParseResult(success=parsed.success, document=document, error=parsed.error)

    def resolve_production_code(self, product: ProductDefinition,
                                selection: CustomizationSelection) -> ProductionCodeDocument:
        # 잘못된 템플릿은 빈 문서에서 시작 (예외를 던지지 않음)
        return self.resolve_with_result(product, selection).document

    def unit_price(self, product: ProductDefinition, selection: CustomizationSelection) -> float:
        # 더블 샷 선택 시 추가 요금
        surcharge = self.double_shot_surcharge if selection.is_double_shot else 0
        return round(product.price + surcharge, 2)

    def describe_production_codes(self, document: ProductionCodeDocument) -> List[ProductionCodeLabel]:
        # 주문 모니터용 라벨 (주요 코드 우선, 나머지는 문서 순서)
        labels = []
        for code_type in PRIMARY_CODE_ORDER:
            value = document.get(code_type)
            if value is not None:
                labels.append(ProductionCodeLabel(
                    type=code_type, value=value, label=self._code_label(code_type, value), is_primary=True
                ))
        for key, value in document:
            if key not in PRIMARY_CODE_ORDER:
                labels.append(ProductionCodeLabel(type=key, value=value, label=f"{key}:{value}", is_primary=False))
        return labels

    def _code_label(self, code_type: str, value: str) -> str:
        if code_type == CLASS_CODE:
            return f"Product: {value}"
        if code_type == CUP_CODE:
            return f"Cup: {CUP_SIZES.get(value, value)}"
        if code_type == BEAN_CODE:
            return f"Bean: {BEAN_TYPES.get(value, value)}"
        if code_type == MILK_CODE:
            return f"Milk: {MILK_TYPES.get(value, value)}"
        return f"{code_type}: {value}"
