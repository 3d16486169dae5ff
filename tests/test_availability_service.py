"""
Tests for ingredient registry and availability resolution
"""
import unittest

from models.ingredient import IngredientDescriptor, IngredientLevel
from models.product import ProductDefinition
from services.ingredient_registry import IngredientRegistry, DEFAULT_WARNING_LEVEL
from services.availability_service import AvailabilityService, parse_ingredient_codes


class TestIngredientRegistry(unittest.TestCase):
    """Test cases for IngredientRegistry"""

    def setUp(self):
        self.registry = IngredientRegistry()

    def test_default_registry_has_machine_slots(self):
        """Test the fifteen machine ingredient slots are registered"""
        self.assertEqual(len(self.registry.all()), 15)
        self.assertEqual(self.registry.display_name("CoffeeMatter3"), "Milk")
        self.assertEqual(self.registry.display_name("CoffeeMatter3", localized=True), "牛奶")
        self.assertEqual(self.registry.full_name("CoffeeMatter4"), "Ice (冰块)")

    def test_unknown_code_degrades_to_raw_code(self):
        """Test unknown codes never raise"""
        self.assertIsNone(self.registry.get("X9"))
        self.assertEqual(self.registry.display_name("X9"), "X9")
        self.assertEqual(self.registry.full_name("X9"), "X9")
        self.assertEqual(self.registry.warning_threshold("X9"), DEFAULT_WARNING_LEVEL)

    def test_categories(self):
        """Test category lookup"""
        cups = [ing.code for ing in self.registry.by_category("Cups")]
        self.assertIn("CoffeeMatter1", cups)
        self.assertIn("CoffeeMatter10", cups)
        self.assertEqual(self.registry.categories()[0], "Cups")


class TestAvailabilityService(unittest.TestCase):
    """Test cases for AvailabilityService"""

    def setUp(self):
        self.service = AvailabilityService(IngredientRegistry())

    def test_missing_reading_is_unavailable(self):
        """Test that a code absent from the readings fails safe"""
        verdict = self.service.resolve_availability(["X1", "X2"], {"X1": 1})

        self.assertFalse(verdict.available)
        self.assertEqual([ing.code for ing in verdict.missing_ingredients], ["X2"])
        self.assertEqual(verdict.missing_ingredients[0].name, "X2")
        self.assertIn("X2", verdict.reason)

    def test_all_in_stock(self):
        """Test binary in-stock readings"""
        verdict = self.service.resolve_availability(
            ["CoffeeMatter2", "CoffeeMatter3"], {"CoffeeMatter2": 1, "CoffeeMatter3": "1"}
        )
        self.assertTrue(verdict.available)
        self.assertEqual(verdict.missing_ingredients, [])
        self.assertEqual(verdict.reason, "All ingredients available")

    def test_missing_order_follows_required_codes(self):
        """Test missing ingredients keep the required order and display names"""
        verdict = self.service.resolve_availability(
            ["CoffeeMatter4", "CoffeeMatter2", "CoffeeMatter3"],
            {"CoffeeMatter2": 1, "CoffeeMatter3": 0, "CoffeeMatter4": 0}
        )
        self.assertEqual([ing.code for ing in verdict.missing_ingredients], ["CoffeeMatter4", "CoffeeMatter3"])
        self.assertEqual(verdict.reason, "Missing ingredients: Ice, Milk")

    def test_percentage_readings_use_warning_threshold(self):
        """Test legacy percentage telemetry"""
        # CoffeeMatter4 (Ice) warning level is 25
        self.assertFalse(self.service.resolve_availability(["CoffeeMatter4"], {"CoffeeMatter4": 25}).available)
        self.assertTrue(self.service.resolve_availability(["CoffeeMatter4"], {"CoffeeMatter4": 26}).available)
        self.assertTrue(self.service.resolve_availability(["CoffeeMatter4"], {"CoffeeMatter4": "80"}).available)

    def test_unknown_code_uses_default_threshold(self):
        """Test unknown ingredient thresholds"""
        self.assertFalse(self.service.resolve_availability(["X1"], {"X1": DEFAULT_WARNING_LEVEL}).available)
        self.assertTrue(self.service.resolve_availability(["X1"], {"X1": DEFAULT_WARNING_LEVEL + 1}).available)

    def test_unparseable_reading_is_unavailable(self):
        """Test garbage readings fail safe"""
        verdict = self.service.resolve_availability(["CoffeeMatter2"], {"CoffeeMatter2": "n/a"})
        self.assertFalse(verdict.available)

    def test_empty_requirements_are_available(self):
        """Test products without ingredients"""
        verdict = self.service.resolve_availability([], {})
        self.assertTrue(verdict.available)
        self.assertEqual(verdict.reason, "No ingredients required")

    def test_duplicate_codes_reported_once(self):
        """Test duplicate required codes are not meaningful"""
        verdict = self.service.resolve_availability(["X1", "X1"], {})
        self.assertEqual(len(verdict.missing_ingredients), 1)

    def test_any_depleted_code_makes_product_unavailable(self):
        """Test availability monotonicity"""
        codes = ["CoffeeMatter1", "CoffeeMatter2", "CoffeeMatter3"]
        for depleted in codes:
            readings = {code: 1 for code in codes}
            readings[depleted] = 0
            self.assertFalse(self.service.resolve_availability(codes, readings).available)
            del readings[depleted]
            self.assertFalse(self.service.resolve_availability(codes, readings).available)

    def test_check_products_and_summary(self):
        """Test multi-product availability and dashboard summary"""
        products = [
            ProductDefinition(id="1", name="Americano", price=3.0,
                              required_ingredient_codes=["CoffeeMatter2", "CoffeeMatter5"]),
            ProductDefinition(id="2", name="Latte", price=4.0,
                              required_ingredient_codes=["CoffeeMatter2", "CoffeeMatter3"]),
            ProductDefinition(id="3", name="Milk Tea", price=3.5,
                              required_ingredient_codes=["CoffeeMatter3"]),
        ]
        readings = {"CoffeeMatter2": 1, "CoffeeMatter3": 0, "CoffeeMatter5": 1}

        availability_map = self.service.check_products(products, readings)
        self.assertTrue(availability_map["1"].available)
        self.assertFalse(availability_map["2"].available)

        summary = self.service.availability_summary(availability_map)
        self.assertEqual(summary.total, 3)
        self.assertEqual(summary.available, 1)
        self.assertEqual(summary.unavailable, 2)
        self.assertEqual(summary.availability_rate, 33.3)
        self.assertEqual(summary.most_common_missing, [{"code": "CoffeeMatter3", "affected_products": 2}])

    def test_empty_summary(self):
        """Test summary of no products"""
        summary = self.service.availability_summary({})
        self.assertEqual(summary.availability_rate, 100.0)

    def test_ingredient_levels(self):
        """Test dashboard status grading"""
        self.assertEqual(self.service.ingredient_level("CoffeeMatter3", 0), IngredientLevel.CRITICAL)
        self.assertEqual(self.service.ingredient_level("CoffeeMatter3", 1), IngredientLevel.NORMAL)
        self.assertEqual(self.service.ingredient_level("CoffeeMatter3", 8), IngredientLevel.CRITICAL)
        self.assertEqual(self.service.ingredient_level("CoffeeMatter3", 15), IngredientLevel.WARNING)
        self.assertEqual(self.service.ingredient_level("CoffeeMatter3", 90), IngredientLevel.NORMAL)
        self.assertEqual(self.service.ingredient_level("X1", 90), IngredientLevel.UNKNOWN)

    def test_critical_ingredients(self):
        """Test depleted known ingredients are listed"""
        critical = self.service.critical_ingredients({"CoffeeMatter3": 0, "CoffeeMatter2": 1, "X1": 0})
        self.assertEqual([ing.code for ing in critical], ["CoffeeMatter3"])

    def test_custom_registry(self):
        """Test a registry built from explicit descriptors"""
        registry = IngredientRegistry([IngredientDescriptor("S1", "Syrup", "糖浆", "Coffee", 40, 10)])
        service = AvailabilityService(registry)
        self.assertFalse(service.resolve_availability(["S1"], {"S1": 40}).available)
        self.assertEqual(service.ingredient_display_list(["S1", "Z"])[1]["name"], "Z")

    def test_parse_ingredient_codes(self):
        """Test stored comma-separated codes"""
        self.assertEqual(parse_ingredient_codes("CoffeeMatter1, CoffeeMatter2,,"),
                         ["CoffeeMatter1", "CoffeeMatter2"])
        self.assertEqual(parse_ingredient_codes(None), [])
        self.assertEqual(parse_ingredient_codes(["A", " B "]), ["A", "B"])


if __name__ == '__main__':
    unittest.main()
