"""
Ingredient registry - static lookup of machine ingredient slots
"""
from typing import Dict, List, Optional, Iterable

from models.ingredient import IngredientDescriptor

DEFAULT_WARNING_LEVEL = 20

DEFAULT_INGREDIENTS = [
    IngredientDescriptor("CoffeeMatter1", "8oz Paper Cups", "8oz纸杯", "Cups", 20, 5),
    IngredientDescriptor("CoffeeMatter2", "Coffee Beans", "咖啡豆", "Coffee", 15, 5),
    IngredientDescriptor("CoffeeMatter3", "Milk", "牛奶", "Milk", 20, 10),
    IngredientDescriptor("CoffeeMatter4", "Ice", "冰块", "Ice", 25, 10),
    IngredientDescriptor("CoffeeMatter5", "Coffee Machine Water", "咖啡机水", "Coffee", 15, 5),
    IngredientDescriptor("CoffeeMatter6", "Cup #1", "1号杯", "Cups", 30, 10),
    IngredientDescriptor("CoffeeMatter7", "2 Cup Sugar", "2杯糖", "Coffee", 25, 5),
    IngredientDescriptor("CoffeeMatter8", "3 Cups", "3杯子", "Cups", 20, 5),
    IngredientDescriptor("CoffeeMatter9", "Printer Paper", "打印纸张", "Supplies", 10, 2),
    IngredientDescriptor("CoffeeMatter10", "12oz Paper Cups", "12oz纸杯", "Cups", 20, 5),
    IngredientDescriptor("CoffeeMatter11", "Coffee Machine Syrup", "咖啡机糖浆", "Coffee", 15, 5),
    IngredientDescriptor("CoffeeMatter12", "Robot Syrup", "机器人糖浆", "Coffee", 15, 5),
    IngredientDescriptor("CoffeeMatter13", "Coffee Beans 2", "咖啡豆2", "Coffee", 15, 5),
    IngredientDescriptor("CoffeeMatter14", "Milk 2", "牛奶2", "Milk", 20, 10),
    IngredientDescriptor("CoffeeMatter15", "Ice Machine Water", "制冰机水", "Ice", 15, 5),
]


class IngredientRegistry:
    # 재료 코드 -> 표시 이름/분류/임계값 조회 (상태 없음)

    def __init__(self, ingredients: Optional[Iterable[IngredientDescriptor]] = None,
                 default_warning_level: float = DEFAULT_WARNING_LEVEL):
        self._ingredients: Dict[str, IngredientDescriptor] = {
            ingredient.code: ingredient
            for ingredient in (DEFAULT_INGREDIENTS if ingredients is None else ingredients)
        }
        self.default_warning_level = default_warning_level

    def get(self, code: str) -> Optional[IngredientDescriptor]:
        return self._ingredients.get(code)

    def __contains__(self, code: str) -> bool:
        return code in self._ingredients

    def display_name(self, code: str, localized: bool = False) -> str:
        # 등록되지 않은 코드는 원래 코드 문자열로 표시
        ingredient = self._ingredients.get(code)
        if not ingredient:
            return code
        return ingredient.display_name_localized if localized else ingredient.display_name

    def full_name(self, code: str) -> str:
        ingredient = self._ingredients.get(code)
        if not ingredient:
            return code
        return f"{ingredient.display_name} ({ingredient.display_name_localized})"

    def warning_threshold(self, code: str) -> float:
        # 알 수 없는 재료는 보수적인 기본 임계값 사용
        ingredient = self._ingredients.get(code)
        return ingredient.warning_level if ingredient else self.default_warning_level

    def by_category(self, category: str) -> List[IngredientDescriptor]:
        return [ing for ing in self._ingredients.values() if ing.category == category]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for ingredient in self._ingredients.values():
            if ingredient.category not in seen:
                seen.append(ingredient.category)
        return seen

    def all(self) -> List[IngredientDescriptor]:
        return list(self._ingredients.values())
