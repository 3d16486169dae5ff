"""
Database repository classes
"""
import sqlite3
import json
import logging
from typing import List, Optional, Dict, Any, Tuple

from models.ingredient import parse_ingredient_codes
from models.order import ItemStatus, OrderItem
from models.product import ProductDefinition
from models.production_code import ProductionCodeDocument
from utils.logging import get_logger, log_event
from .connection import DatabaseConnection

logger = get_logger(__name__)

PRODUCT_COLUMNS = """
product_id, name, name_localized, price, type, category, matter_codes, json_code_val,
has_bean_options, has_milk_options, has_ice_options, has_shot_options, has_latte_art,
default_bean_code, default_milk_code, default_ice, default_shots,
iced_class_code, double_shot_class_code, iced_and_double_class_code
"""


def _template_to_text(template: Any) -> str:
    # 생산 코드 템플릿을 JSON 문자열로 저장 (원본 문자열은 그대로 보존)
    if isinstance(template, ProductionCodeDocument):
        return template.to_json()
    if isinstance(template, str):
        return template
    return json.dumps(template or [], ensure_ascii=False)


class ProductRepository:
    # 제품 데이터 접근 계층 (데이터베이스 CRUD 작업)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def _row_to_product(self, row: Tuple) -> ProductDefinition:
        return ProductDefinition(
            id=row[0],
            name=row[1],
            name_localized=row[2] or "",
            price=row[3],
            type=row[4],
            category=row[5] or "Classics",
            required_ingredient_codes=parse_ingredient_codes(row[6]),
            production_code_template=row[7] or "",
            has_bean_options=bool(row[8]),
            has_milk_options=bool(row[9]),
            has_ice_options=bool(row[10]),
            has_shot_options=bool(row[11]),
            has_latte_art=bool(row[12]),
            default_bean_code=row[13] or 1,
            default_milk_code=row[14] or 1,
            default_ice=bool(row[15]),
            default_shots=row[16] or 1,
            iced_class_code=row[17],
            double_shot_class_code=row[18],
            iced_and_double_class_code=row[19]
        )

    def save_product(self, product: ProductDefinition) -> bool:
        # 제품 생성 또는 전체 갱신
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute(f"""
                INSERT OR REPLACE INTO Products ({PRODUCT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    str(product.id), product.name, product.name_localized, product.price,
                    product.type.value, product.category,
                    ",".join(product.required_ingredient_codes),
                    _template_to_text(product.production_code_template),
                    int(product.has_bean_options), int(product.has_milk_options),
                    int(product.has_ice_options), int(product.has_shot_options),
                    int(product.has_latte_art),
                    product.default_bean_code, product.default_milk_code,
                    int(product.default_ice), product.default_shots,
                    product.iced_class_code, product.double_shot_class_code,
                    product.iced_and_double_class_code
                ))

                conn.commit()
                return True
            except sqlite3.Error as e:
                log_event("repository.save_product_failed", {"product_id": product.id, "error": e},
                          level=logging.ERROR, log=logger)
                return False

    def get_product_by_id(self, product_id: str) -> Optional[ProductDefinition]:
        # 제품 ID로 특정 제품 상세 정보 조회
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM Products WHERE product_id = ?",
                           (str(product_id),))

            result = cursor.fetchone()
            return self._row_to_product(result) if result else None

    def list_products(self, category: Optional[str] = None) -> List[ProductDefinition]:
        # 전체 제품 목록 (카테고리 필터 선택)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            sql = f"SELECT {PRODUCT_COLUMNS} FROM Products"
            params = []

            if category:
                sql += " WHERE category = ?"
                params.append(category)

            sql += " ORDER BY name"
            cursor.execute(sql, params)

            return [self._row_to_product(row) for row in cursor.fetchall()]


class OrderRepository:
    # 주문 데이터 접근 계층 (주문 생성, 조회, 아이템 상태 변경)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def _insert_order_item(self, cursor: sqlite3.Cursor, order_item: OrderItem, position: int) -> None:
        # 주문 라인은 JSON으로 직렬화
        cursor.execute("""
        INSERT INTO Order_Items (order_item_id, order_id, position, line_json, status, is_test)
        VALUES (?, ?, ?, ?, ?, ?)
        """, (
            order_item.order_item_id, order_item.order_id, position,
            json.dumps(order_item.line.to_dict(), ensure_ascii=False),
            order_item.status.value, int(order_item.is_test)
        ))

    def create_order_with_items(self, order_id: str, order_num: str, device_id: int, total_amount: float,
                                order_items: List[OrderItem], status: ItemStatus = ItemStatus.QUEUED) -> bool:
        # 주문과 아이템을 하나의 트랜잭션으로 저장 (하나라도 실패하면 전체 롤백)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Orders (order_id, order_num, device_id, total_amount, status)
                VALUES (?, ?, ?, ?, ?)
                """, (order_id, order_num, device_id, total_amount, status.value))

                for position, order_item in enumerate(order_items):
                    self._insert_order_item(cursor, order_item, position)

                conn.commit()
                return True

            except sqlite3.Error as e:
                conn.rollback()
                log_event("repository.create_order_failed",
                          {"order_id": order_id, "order_num": order_num, "error": e},
                          level=logging.ERROR, log=logger)
                return False

    def _fetch_items(self, cursor: sqlite3.Cursor, order_id: str) -> List[Dict[str, Any]]:
        cursor.execute("""
        SELECT order_item_id, line_json, status, is_test
        FROM Order_Items WHERE order_id = ?
        ORDER BY position
        """, (order_id,))

        items = []
        for row in cursor.fetchall():
            item = json.loads(row[1])
            status = ItemStatus.from_code(row[2])
            item.update({
                "order_item_id": row[0],
                "order_id": order_id,
                "status": status.value,
                "status_name": status.display_name,
                "is_test": bool(row[3])
            })
            items.append(item)
        return items

    def get_order_details(self, order_id: str) -> Optional[Dict[str, Any]]:
        # 주문 상세 정보 조회 (주문정보 + 주문아이템들)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT order_id, order_num, device_id, total_amount, status, created_at
            FROM Orders WHERE order_id = ?
            """, (order_id,))

            order_row = cursor.fetchone()
            if not order_row:
                return None

            return {
                "order_info": {
                    "order_id": order_row[0],
                    "order_num": order_row[1],
                    "device_id": order_row[2],
                    "total_amount": order_row[3],
                    "status": order_row[4],
                    "created_at": order_row[5]
                },
                "order_items": self._fetch_items(cursor, order_id)
            }

    def get_order_own_status(self, order_id: str) -> Optional[ItemStatus]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT status FROM Orders WHERE order_id = ?", (order_id,))
            row = cursor.fetchone()
            return ItemStatus.from_code(row[0]) if row else None

    def get_item_statuses(self, order_id: str) -> List[Tuple[str, ItemStatus]]:
        # 주문에 속한 모든 아이템의 (ID, 상태) 목록 (테스트 아이템 포함)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT order_item_id, status FROM Order_Items
            WHERE order_id = ? ORDER BY position
            """, (order_id,))
            return [(row[0], ItemStatus.from_code(row[1])) for row in cursor.fetchall()]

    def get_order_id_for_item(self, order_item_id: str) -> Optional[str]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT order_id FROM Order_Items WHERE order_item_id = ?", (order_item_id,))
            row = cursor.fetchone()
            return row[0] if row else None

    def update_item_status(self, order_item_id: str, status: ItemStatus) -> bool:
        # 아이템 하나의 상태 변경 (다른 아이템과 트랜잭션으로 묶지 않음)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("UPDATE Order_Items SET status = ? WHERE order_item_id = ?",
                               (status.value, order_item_id))
                conn.commit()
                return cursor.rowcount > 0

            except sqlite3.Error as e:
                log_event("repository.update_item_status_failed",
                          {"order_item_id": order_item_id, "status": status.name, "error": e},
                          level=logging.ERROR, log=logger)
                return False

    def update_order_status(self, order_id: str, status: ItemStatus) -> bool:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("UPDATE Orders SET status = ? WHERE order_id = ?", (status.value, order_id))
                conn.commit()
                return cursor.rowcount > 0

            except sqlite3.Error as e:
                log_event("repository.update_order_status_failed",
                          {"order_id": order_id, "status": status.name, "error": e},
                          level=logging.ERROR, log=logger)
                return False

    def list_orders(self, limit: int = 100) -> List[Dict[str, Any]]:
        # 최근 주문 목록 (아이템 포함)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT order_id, order_num, device_id, total_amount, status, created_at
            FROM Orders ORDER BY created_at DESC, rowid DESC LIMIT ?
            """, (limit,))

            orders = []
            for row in cursor.fetchall():
                orders.append({
                    "order_id": row[0],
                    "order_num": row[1],
                    "device_id": row[2],
                    "total_amount": row[3],
                    "status": row[4],
                    "created_at": row[5],
                    "items": self._fetch_items(cursor, row[0])
                })
            return orders


class DeviceStatusRepository:
    # 머신 재료 센서 값 저장/조회 (단일 장치)

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def save_readings(self, device_id: int, readings: Dict[str, Any]) -> bool:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Device_Status (device_id, matter_status_json) VALUES (?, ?)
                """, (device_id, json.dumps(readings)))
                conn.commit()
                return True

            except sqlite3.Error as e:
                log_event("repository.save_readings_failed", {"device_id": device_id, "error": e},
                          level=logging.ERROR, log=logger)
                return False

    def get_latest_readings(self, device_id: int) -> Dict[str, Any]:
        # 최신 센서 값 (기록이 없거나 파싱 실패 시 빈 딕셔너리)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT matter_status_json FROM Device_Status
            WHERE device_id = ? ORDER BY id DESC LIMIT 1
            """, (device_id,))

            row = cursor.fetchone()
            if not row:
                return {}

            try:
                readings = json.loads(row[0])
            except ValueError as e:
                log_event("repository.bad_device_status", {"device_id": device_id, "error": e},
                          level=logging.WARNING, log=logger)
                return {}

            return readings if isinstance(readings, dict) else {}


class LatteArtRepository:
    # 라떼아트 기본 디자인 조회

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def add_design(self, name: str, image_path: str) -> Optional[int]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("INSERT INTO Latte_Art_Designs (name, image_path) VALUES (?, ?)",
                               (name, image_path))
                conn.commit()
                return cursor.lastrowid

            except sqlite3.Error as e:
                log_event("repository.add_design_failed", {"name": name, "error": e},
                          level=logging.ERROR, log=logger)
                return None

    def get_design_path(self, design_id: int) -> Optional[str]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT image_path FROM Latte_Art_Designs WHERE design_id = ? AND is_active = 1
            """, (design_id,))
            row = cursor.fetchone()
            return row[0] if row else None
