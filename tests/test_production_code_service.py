"""
Tests for production code resolution
"""
import itertools
import json
import unittest

from models.product import ProductDefinition, CustomizationSelection, ProductType
from models.production_code import ProductionCodeDocument
from services.production_code_service import ProductionCodeService, parse_template


def make_product(**overrides):
    data = dict(
        id="p1",
        name="Latte",
        price=4.0,
        type=ProductType.COFFEE,
        production_code_template=[{"classCode": "5000"}],
    )
    data.update(overrides)
    return ProductDefinition(**data)


class TestProductionCodeDocument(unittest.TestCase):
    """Test cases for the ordered single-key document"""

    def test_upsert_replaces_in_place(self):
        """Test that upsert keeps the position of an existing key"""
        document = ProductionCodeDocument([("classCode", "1"), ("CupCode", "2")])
        document.upsert("classCode", "9")
        self.assertEqual(document.to_list(), [{"classCode": "9"}, {"CupCode": "2"}])

    def test_upsert_appends_and_upsert_first_prepends(self):
        """Test where new keys land"""
        document = ProductionCodeDocument([("CupCode", "2")])
        document.upsert("BeanCode", 1)
        document.upsert_first("classCode", "5001")
        self.assertEqual(document.keys(), ["classCode", "CupCode", "BeanCode"])
        self.assertEqual(document.get("BeanCode"), "1")

    def test_wire_shape_is_list_of_single_key_objects(self):
        """Test JSON serialization keeps one object per entry"""
        document = ProductionCodeDocument([("classCode", "5001"), ("CupCode", "3")])
        self.assertEqual(json.loads(document.to_json()), [{"classCode": "5001"}, {"CupCode": "3"}])


class TestParseTemplate(unittest.TestCase):
    """Test cases for template parsing"""

    def test_parse_json_string(self):
        """Test parsing the stored JSON form"""
        result = parse_template('[{"classCode": "5001"}, {"CupCode": 2}]')
        self.assertTrue(result.success)
        self.assertEqual(result.document.to_list(), [{"classCode": "5001"}, {"CupCode": "2"}])

    def test_empty_template_is_valid(self):
        """Test that a missing template is an empty document"""
        for raw in (None, "", "   ", []):
            result = parse_template(raw)
            self.assertTrue(result.success)
            self.assertEqual(len(result.document), 0)

    def test_malformed_templates_degrade_to_empty_document(self):
        """Test that malformed templates never raise"""
        for raw in ("{not json", '{"classCode": "5001"}', '[{"a": "1", "b": "2"}]', '["x"]', 42):
            result = parse_template(raw)
            self.assertFalse(result.success)
            self.assertEqual(len(result.document), 0)
            self.assertIsNotNone(result.error)

    def test_repeated_template_key_is_collapsed(self):
        """Test that a duplicated key keeps its first position"""
        result = parse_template([{"classCode": "1"}, {"CupCode": "2"}, {"classCode": "3"}])
        self.assertEqual(result.document.to_list(), [{"classCode": "3"}, {"CupCode": "2"}])


class TestProductionCodeService(unittest.TestCase):
    """Test cases for ProductionCodeService"""

    def setUp(self):
        """Set up the service"""
        self.service = ProductionCodeService()

    def test_iced_variant_without_option_flags(self):
        """Test iced variant selection with single shot"""
        product = make_product(iced_class_code="5101", double_shot_class_code="5102")
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=True, shots=1))

        self.assertEqual(document.get("classCode"), "5101")
        self.assertEqual(document.get("CupCode"), "3")
        self.assertNotIn("IceCode", document)
        self.assertNotIn("ShotCode", document)

    def test_iced_double_falls_back_to_iced_variant(self):
        """Test that the iced variant wins when no combined variant exists"""
        product = make_product(iced_class_code="5101", double_shot_class_code="5102")
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=True, shots=2))

        self.assertEqual(document.get("classCode"), "5101")
        self.assertEqual(document.get("CupCode"), "3")

    def test_plain_product_with_ice_option(self):
        """Test fallback IceCode for a product without variants"""
        product = make_product(has_ice_options=True, has_shot_options=False)
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=False, shots=1))

        self.assertEqual(document.to_list(), [{"classCode": "5000"}, {"CupCode": "2"}, {"IceCode": "0"}])

    def test_combined_variant_has_highest_precedence(self):
        """Test that iced+double beats the single-dimension variants"""
        product = make_product(iced_class_code="5101", double_shot_class_code="5102",
                               iced_and_double_class_code="5103",
                               has_ice_options=True, has_shot_options=True)
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=True, shots=2))

        self.assertEqual(document.get("classCode"), "5103")
        self.assertNotIn("IceCode", document)
        self.assertNotIn("ShotCode", document)

    def test_double_shot_variant(self):
        """Test double shot variant with an explicit ice code"""
        product = make_product(double_shot_class_code="5102", has_ice_options=True, has_shot_options=True)
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=False, shots=2))

        self.assertEqual(document.get("classCode"), "5102")
        self.assertEqual(document.get("IceCode"), "0")
        self.assertNotIn("ShotCode", document)

    def test_shot_code_when_no_variant(self):
        """Test ShotCode follows the selected shots"""
        product = make_product(has_shot_options=True)
        document = self.service.resolve_production_code(product, CustomizationSelection(shots=2))
        self.assertEqual(document.get("ShotCode"), "2")

    def test_class_code_prepended_when_template_has_none(self):
        """Test that a variant class code becomes the first entry"""
        product = make_product(production_code_template=[{"BeanCode": "1"}], iced_class_code="5101")
        document = self.service.resolve_production_code(
            product, CustomizationSelection(bean_code=2, ice=True)
        )
        self.assertEqual(document.to_list(),
                         [{"classCode": "5101"}, {"BeanCode": "2"}, {"CupCode": "3"}])

    def test_no_class_code_when_nothing_configured(self):
        """Test that no class code is invented"""
        product = make_product(production_code_template=[])
        document = self.service.resolve_production_code(product, CustomizationSelection())
        self.assertEqual(document.to_list(), [{"CupCode": "2"}])

    def test_bean_and_milk_codes(self):
        """Test bean/milk overwrite and append rules"""
        product = make_product(production_code_template=[{"classCode": "5000"}, {"MilkCode": "1"}],
                               has_bean_options=True, has_milk_options=False)
        document = self.service.resolve_production_code(
            product, CustomizationSelection(bean_code=2, milk_code=2)
        )
        self.assertEqual(document.to_list(),
                         [{"classCode": "5000"}, {"MilkCode": "2"}, {"BeanCode": "2"}, {"CupCode": "2"}])

    def test_bean_code_not_added_without_option(self):
        """Test that disabled options add no entry"""
        document = self.service.resolve_production_code(make_product(), CustomizationSelection(bean_code=2))
        self.assertNotIn("BeanCode", document)
        self.assertNotIn("MilkCode", document)

    def test_template_ice_code_removed_when_variant_used(self):
        """Test that an ice variant suppresses a template IceCode"""
        product = make_product(production_code_template=[{"classCode": "5000"}, {"IceCode": "0"}],
                               iced_class_code="5101", has_ice_options=True)
        document = self.service.resolve_production_code(product, CustomizationSelection(ice=True))
        self.assertNotIn("IceCode", document)

    def test_template_is_not_mutated(self):
        """Test that resolution copies the template"""
        template = [{"classCode": "5000"}]
        product = make_product(production_code_template=template, iced_class_code="5101")
        self.service.resolve_production_code(product, CustomizationSelection(ice=True))
        self.assertEqual(template, [{"classCode": "5000"}])

    def test_malformed_template_still_resolves(self):
        """Test that a broken template yields a sparse document"""
        product = make_product(production_code_template="{broken", has_ice_options=True)
        result = self.service.resolve_with_result(product, CustomizationSelection(ice=True))

        self.assertFalse(result.success)
        self.assertEqual(result.document.to_list(), [{"CupCode": "3"}, {"IceCode": "1"}])

    def test_properties_hold_for_all_combinations(self):
        """Test idempotence, key uniqueness, cup code, ice and shot encoding across flags"""
        flags = list(itertools.product([False, True], repeat=4))
        variants = [None, "5101"]
        for has_bean, has_milk, has_ice, has_shot in flags:
            for iced, double, combined in itertools.product(variants, [None, "5102"], [None, "5103"]):
                product = make_product(
                    has_bean_options=has_bean, has_milk_options=has_milk,
                    has_ice_options=has_ice, has_shot_options=has_shot,
                    iced_class_code=iced, double_shot_class_code=double,
                    iced_and_double_class_code=combined
                )
                for ice, shots in itertools.product([False, True], [1, 2]):
                    selection = CustomizationSelection(ice=ice, shots=shots)
                    first = self.service.resolve_production_code(product, selection)
                    second = self.service.resolve_production_code(product, selection)

                    self.assertEqual(first.to_json(), second.to_json())
                    self.assertEqual(len(first.keys()), len(set(first.keys())))
                    self.assertEqual(first.keys().count("CupCode"), 1)
                    self.assertEqual(first.get("CupCode"), "3" if ice else "2")

                    if self.service.uses_variant_for_ice(product, selection):
                        self.assertNotIn("IceCode", first)
                    elif has_ice:
                        self.assertEqual(first.keys().count("IceCode"), 1)

                    if self.service.uses_variant_for_shots(product, selection):
                        self.assertNotIn("ShotCode", first)
                    elif has_shot:
                        self.assertEqual(first.get("ShotCode"), str(shots))
                    else:
                        self.assertNotIn("ShotCode", first)

    def test_unit_price(self):
        """Test double shot surcharge"""
        product = make_product(price=4.0)
        self.assertEqual(self.service.unit_price(product, CustomizationSelection(shots=1)), 4.0)
        self.assertEqual(self.service.unit_price(product, CustomizationSelection(shots=2)), 4.5)

    def test_resolve_defaults(self):
        """Test defaults come from the product"""
        product = make_product(default_bean_code=2, default_milk_code=2, default_ice=False, default_shots=2)
        defaults = self.service.resolve_defaults(product)
        self.assertEqual((defaults.bean_code, defaults.milk_code, defaults.ice, defaults.shots), (2, 2, False, 2))
        self.assertFalse(defaults.latte_art.is_selected)

    def test_describe_production_codes(self):
        """Test monitor labels put primary codes first"""
        document = ProductionCodeDocument([("IceCode", "1"), ("MilkCode", "2"), ("CupCode", "3"),
                                           ("classCode", "5001")])
        labels = self.service.describe_production_codes(document)

        self.assertEqual([label.type for label in labels], ["classCode", "CupCode", "MilkCode", "IceCode"])
        self.assertEqual(labels[1].label, "Cup: Large")
        self.assertEqual(labels[2].label, "Milk: Oat Milk")
        self.assertFalse(labels[3].is_primary)
        self.assertEqual(labels[3].label, "IceCode:1")


if __name__ == '__main__':
    unittest.main()
