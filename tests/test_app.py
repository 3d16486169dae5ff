"""
Tests for the Flask API and settings
"""
import unittest
import tempfile
import os
from unittest.mock import patch

from app import create_app
from config import load_settings
from init_db import init_database


class TestKioskApi(unittest.TestCase):
    """Test cases for the kiosk HTTP API"""

    def setUp(self):
        """Set up test database and client"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.app = create_app(self.test_db.name)
        self.app.testing = True
        init_database(self.app.config["ENGINE"])
        self.client = self.app.test_client()

    def tearDown(self):
        """Clean up test database"""
        os.unlink(self.test_db.name)

    def _place_order(self, *product_ids):
        response = self.client.post('/api/orders', json={
            "items": [{"product_id": product_id} for product_id in product_ids]
        })
        self.assertEqual(response.status_code, 200)
        return response.get_json()["order_id"]

    def test_health(self):
        """Test health check"""
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "ok")

    def test_menu_and_availability(self):
        """Test menu listing and availability summary"""
        menu = self.client.get('/api/products').get_json()
        self.assertEqual(len(menu["products"]), 4)

        response = self.client.post('/api/device/status', json={"readings": {"CoffeeMatter4": 0}})
        self.assertEqual(response.status_code, 200)

        summary = self.client.get('/api/products/availability').get_json()["availability"]
        self.assertEqual(summary["total"], 4)
        self.assertEqual(summary["available"], 0)

    def test_device_status_requires_readings(self):
        """Test malformed device status payloads"""
        response = self.client.post('/api/device/status', json={"levels": []})
        self.assertEqual(response.status_code, 400)

    def test_save_product(self):
        """Test saving a product through the API"""
        response = self.client.post('/api/products', json={
            "id": "10", "name": "Flat White", "price": 4.2,
            "required_ingredient_codes": "CoffeeMatter2,CoffeeMatter3",
            "production_code_template": '[{"classCode": "5010"}]',
            "has_milk_options": True
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["warnings"], [])

        response = self.client.post('/api/products', json={"name": "No id"})
        self.assertEqual(response.status_code, 400)

    def test_compose(self):
        """Test order line preview"""
        response = self.client.post('/api/orders/compose', json={
            "product_id": "2", "selection": {"milk_code": 2}, "quantity": 1
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["order_line"]["option_summary"],
                         "Bean1, Oat Milk, Hot, Single Shot")

        response = self.client.post('/api/orders/compose', json={"product_id": "2", "quantity": -2})
        self.assertEqual(response.status_code, 400)

    def test_request_body_variants(self):
        """Test literal and null selection values, and malformed bodies map to 4xx"""
        response = self.client.post('/api/orders/compose', json={
            "product_id": "2", "selection": {"latte_art": "none"}
        })
        self.assertEqual(response.status_code, 200)

        response = self.client.post('/api/orders', json={
            "items": [{"product_id": "1", "selection": {"bean_code": None}}]
        })
        self.assertEqual(response.status_code, 200)

        bad_requests = [
            ('/api/orders/compose', {"product_id": "2", "selection": "iced"}),
            ('/api/orders/compose', {"product_id": "2", "selection": {"latte_art": {"kind": "predefined"}}}),
            ('/api/orders', {"items": [{"product_id": "1", "selection": {"shots": "two"}}]}),
            ('/api/orders', {"items": "1"}),
            ('/api/orders', ["1"]),
            ('/api/products', {"id": "11", "name": "Bad", "price": 1, "has_ice_options": "perhaps"}),
        ]
        for url, body in bad_requests:
            response = self.client.post(url, json=body)
            self.assertEqual(response.status_code, 400, (url, body))
            self.assertFalse(response.get_json()["success"])

    def test_confirm_force_string_false(self):
        """Test confirm_force "false" does not force-cancel a processing order"""
        order_id = self._place_order("1")
        item_id = self.client.get(f'/api/orders/{order_id}').get_json()["order_items"][0]["order_item_id"]
        self.client.post(f'/api/order-items/{item_id}/status', json={"status": 4})

        response = self.client.post(f'/api/orders/{order_id}/cancel', json={"confirm_force": "false"})
        self.assertEqual(response.status_code, 409)

        response = self.client.post(f'/api/orders/{order_id}/cancel', json={"confirm_force": "yes-please"})
        self.assertEqual(response.status_code, 400)

    def test_order_lifecycle(self):
        """Test placing, inspecting and cancelling an order"""
        order_id = self._place_order("1")

        response = self.client.get(f'/api/orders/{order_id}')
        self.assertEqual(response.status_code, 200)
        item_id = response.get_json()["order_items"][0]["order_item_id"]

        response = self.client.post(f'/api/order-items/{item_id}/status', json={"status": 4})
        self.assertEqual(response.get_json()["aggregate_status"], "processing")

        response = self.client.post(f'/api/orders/{order_id}/cancel', json={})
        self.assertEqual(response.status_code, 409)

        response = self.client.post(f'/api/orders/{order_id}/cancel', json={"confirm_force": True})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["outcome"], "cancelled")

        orders = self.client.get('/api/orders').get_json()
        self.assertEqual(orders["active"], [])
        self.assertEqual(len(orders["historical"]), 1)

    def test_partial_cancellation_status_code(self):
        """Test per-item failures are reported with a multi-status response"""
        order_id = self._place_order("1", "3")
        order_repo = self.app.config["ENGINE"].order_repo

        with patch.object(order_repo, "update_item_status", return_value=False):
            response = self.client.post(f'/api/orders/{order_id}/cancel', json={})

        self.assertEqual(response.status_code, 207)
        self.assertEqual(response.get_json()["outcome"], "not_cancelled")
        self.assertEqual(len(response.get_json()["failed_item_ids"]), 2)

    def test_unknown_order(self):
        """Test missing orders and items"""
        self.assertEqual(self.client.get('/api/orders/missing').status_code, 404)
        self.assertEqual(self.client.post('/api/orders/missing/cancel', json={}).status_code, 409)
        response = self.client.post('/api/order-items/missing/status', json={})
        self.assertEqual(response.status_code, 400)


class TestSettings(unittest.TestCase):
    """Test cases for environment settings"""

    def test_environment_overrides(self):
        """Test settings read from the environment"""
        env = {"KIOSK_DB_PATH": "/tmp/kiosk.db", "DEVICE_ID": "7", "DOUBLE_SHOT_SURCHARGE": "0.8",
               "DEBUG": "true"}
        with patch.dict(os.environ, env):
            settings = load_settings()

        self.assertEqual(settings.db_path, "/tmp/kiosk.db")
        self.assertEqual(settings.device_id, 7)
        self.assertEqual(settings.double_shot_surcharge, 0.8)
        self.assertTrue(settings.debug)


if __name__ == '__main__':
    unittest.main()
