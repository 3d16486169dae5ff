#!/usr/bin/env python3
"""
데이터베이스 초기화 스크립트
데모용 커피 제품, 라떼아트 디자인, 재료 센서 값을 생성합니다.
"""
from config import settings
from core.order_engine import KioskOrderEngine
from models.product import ProductDefinition, ProductType

DEMO_PRODUCTS = [
    ProductDefinition(
        id="1", name="Americano", name_localized="美式咖啡", price=3.0, type=ProductType.COFFEE,
        required_ingredient_codes=["CoffeeMatter2", "CoffeeMatter5", "CoffeeMatter10"],
        production_code_template=[{"classCode": "5001"}, {"CupCode": "2"}, {"BeanCode": "1"}],
        has_bean_options=True, has_ice_options=True, has_shot_options=True,
        default_ice=False, iced_class_code="5227"
    ),
    ProductDefinition(
        id="2", name="Latte", name_localized="拿铁", price=4.0, type=ProductType.COFFEE,
        required_ingredient_codes=["CoffeeMatter2", "CoffeeMatter3", "CoffeeMatter10"],
        production_code_template=[{"classCode": "5003"}, {"CupCode": "3"}],
        has_bean_options=True, has_milk_options=True, has_ice_options=True, has_shot_options=True,
        has_latte_art=True, default_ice=False,
        iced_class_code="5101", double_shot_class_code="5102", iced_and_double_class_code="5103"
    ),
    ProductDefinition(
        id="3", name="Espresso", name_localized="浓缩咖啡", price=2.5, type=ProductType.COFFEE,
        required_ingredient_codes=["CoffeeMatter2", "CoffeeMatter5", "CoffeeMatter1"],
        production_code_template=[{"classCode": "5004"}],
        default_ice=False
    ),
    ProductDefinition(
        id="4", name="Iced Lemon Tea", name_localized="冰柠檬茶", price=3.5, type=ProductType.TEA,
        required_ingredient_codes=["CoffeeMatter4", "CoffeeMatter12", "CoffeeMatter10"],
        production_code_template=[{"classCode": "6001"}],
        default_ice=True
    ),
]

DEMO_LATTE_ART = [
    ("Heart", "public/latte-art/heart.png"),
    ("Tulip", "public/latte-art/tulip.png"),
    ("Rosetta", "public/latte-art/rosetta.png"),
]


def init_database(engine: KioskOrderEngine) -> bool:
    """Seed demo products, latte art designs and a full-stock sensor reading"""
    for product in DEMO_PRODUCTS:
        result = engine.save_product(product)
        if not result["success"]:
            print(f"❌ 제품 저장 실패: {result['error']}")
            return False
        for warning in result["warnings"]:
            print(f"⚠️ {product.name}: {warning}")

    for name, image_path in DEMO_LATTE_ART:
        if engine.latte_art_repo.add_design(name, image_path) is None:
            print(f"❌ 라떼아트 디자인 저장 실패: {name}")
            return False

    readings = {ingredient.code: 1 for ingredient in engine.registry.all()}
    if not engine.record_device_status(readings)["success"]:
        print("❌ 재료 센서 값 저장 실패")
        return False

    print(f"📊 Products: {len(DEMO_PRODUCTS)}개 제품")
    print(f"📊 Latte art: {len(DEMO_LATTE_ART)}개 디자인")
    return True


if __name__ == "__main__":
    print("=== Coffee Kiosk 데이터베이스 초기화 ===")
    if init_database(KioskOrderEngine(settings.db_path)):
        print("\n✅ 데이터베이스 초기화 완료! 이제 app.py를 실행할 수 있습니다.")
    else:
        print("\n초기화에 실패했습니다.")
