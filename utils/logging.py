# utils/logging.py
import json
import logging
from typing import Any, Dict

MAX_STR = 500          # 문자열 최대 길이
MAX_LIST = 50          # 리스트 최대 길이
MAX_DEPTH = 5


def _truncate_str(s: str) -> str:
    if len(s) <= MAX_STR:
        return s
    return s[:MAX_STR] + "...(truncated)"


def _sanitize(obj: Any, depth: int = 0) -> Any:
    """
    JSON 직렬화 가능한 형태로 변환 + 로그 폭주 방지.
    """
    if depth > MAX_DEPTH:
        return "...(max_depth)"

    if obj is None or isinstance(obj, (bool, int, float)):
        return obj
    if isinstance(obj, str):
        return _truncate_str(obj)

    if isinstance(obj, dict):
        return {str(k): _sanitize(v, depth + 1) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        lst = list(obj)
        out = [_sanitize(x, depth + 1) for x in lst[:MAX_LIST]]
        if len(lst) > MAX_LIST:
            out.append("...(truncated)")
        return out

    # dataclass / 도메인 모델
    if hasattr(obj, "to_dict"):
        return _sanitize(obj.to_dict(), depth + 1)

    if isinstance(obj, Exception):
        return {"error_type": type(obj).__name__, "error_message": _truncate_str(str(obj))}

    return _truncate_str(str(obj))


# logger setup
logger = logging.getLogger("coffee_kiosk")
logger.setLevel(logging.INFO)
logger.propagate = False

if not logger.handlers:
    h = logging.StreamHandler()
    h.setLevel(logging.DEBUG)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)


def get_logger(name: str) -> logging.Logger:
    """모듈별 하위 로거 (coffee_kiosk.<module>)"""
    if "." in name:
        name = name.split(".")[-1]
    return logger.getChild(name)


def log_event(stage: str, payload: Dict[str, Any], level: int = logging.INFO,
              log: logging.Logger = logger) -> None:
    """
    JSON 구조화 로그 한 줄.
    """
    msg = {
        "stage": stage,
        "payload": _sanitize(payload),
    }
    log.log(level, json.dumps(msg, ensure_ascii=False))
