"""
Runtime configuration loaded from environment variables / .env
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application settings"""
    db_path: str
    device_id: int
    default_warning_level: float
    double_shot_surcharge: float
    port: int
    debug: bool
    secret_key: str


def load_settings() -> Settings:
    # 환경 변수에서 설정 값을 읽어 Settings 생성 (.env 파일 지원)
    return Settings(
        db_path=os.getenv("KIOSK_DB_PATH", "coffee_kiosk.db"),
        device_id=int(os.getenv("DEVICE_ID", 1)),
        default_warning_level=float(os.getenv("DEFAULT_WARNING_LEVEL", 20)),
        double_shot_surcharge=float(os.getenv("DOUBLE_SHOT_SURCHARGE", 0.5)),
        port=int(os.getenv("PORT", 5000)),
        debug=_env_bool("DEBUG"),
        secret_key=os.getenv("SECRET_KEY", "your-secret-key-here")
    )


settings = load_settings()
