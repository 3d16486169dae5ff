"""
Database connection management
"""
import sqlite3
from contextlib import contextmanager
from typing import Generator


class DatabaseConnection:
    # 데이터베이스 연결을 관리하는 클래스

    def __init__(self, db_path: str = "coffee_kiosk.db"):
        # 데이터베이스 파일 경로 설정 및 초기화
        self.db_path = db_path
        self.init_database()

    def init_database(self):
        # 데이터베이스 연결 초기화 및 필요한 테이블 생성
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # 제품 설정 테이블 (생산 코드 템플릿, 옵션 플래그, variant classCode)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Products (
                product_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_localized TEXT,
                price REAL NOT NULL,
                type INTEGER NOT NULL DEFAULT 2,
                category TEXT,
                matter_codes TEXT,
                json_code_val TEXT,
                has_bean_options INTEGER DEFAULT 0,
                has_milk_options INTEGER DEFAULT 0,
                has_ice_options INTEGER DEFAULT 0,
                has_shot_options INTEGER DEFAULT 0,
                has_latte_art INTEGER DEFAULT 0,
                default_bean_code INTEGER DEFAULT 1,
                default_milk_code INTEGER DEFAULT 1,
                default_ice INTEGER DEFAULT 1,
                default_shots INTEGER DEFAULT 1,
                iced_class_code TEXT,
                double_shot_class_code TEXT,
                iced_and_double_class_code TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            # 주문 정보를 저장하는 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Orders (
                order_id TEXT PRIMARY KEY,
                order_num TEXT NOT NULL UNIQUE,
                device_id INTEGER NOT NULL DEFAULT 1,
                total_amount REAL NOT NULL,
                status INTEGER NOT NULL DEFAULT 3,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            # 주문 아이템 (머신이 실행할 생산 코드 포함)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Order_Items (
                order_item_id TEXT PRIMARY KEY,
                order_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                line_json TEXT NOT NULL,
                status INTEGER NOT NULL DEFAULT 3,
                is_test INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY(order_id) REFERENCES Orders(order_id)
            )
            ''')

            # 머신 재료 센서 값 기록
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Device_Status (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                device_id INTEGER NOT NULL,
                matter_status_json TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            # 라떼아트 기본 디자인
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Latte_Art_Designs (
                design_id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                image_path TEXT NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # 컨텍스트 매니저를 사용하여 데이터베이스 연결 자동 관리
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
        finally:
            conn.close()
