"""
Product related data models
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum

from .errors import InvalidSelectionError
from .ingredient import parse_ingredient_codes

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


def parse_bool(value: Any, default: bool = False, field_name: str = "value") -> bool:
    """Decode JSON/form booleans; None means the default, "false"/"0" mean False"""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"{field_name} must be a boolean, got {value!r}")


def parse_int(value: Any, default: int, field_name: str = "value") -> int:
    """Decode an integer field; None or an empty string means the default"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")


class ProductType(Enum):
    TEA = 1
    COFFEE = 2
    ICE_CREAM = 3
    OTHER = 4

    @classmethod
    def from_value(cls, value: Any) -> "ProductType":
        """Decode a stored type (number or name), defaulting to OTHER"""
        if isinstance(value, ProductType):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            pass
        try:
            return cls[str(value).strip().upper().replace("-", "_")]
        except KeyError:
            return cls.OTHER


class LatteArtKind(Enum):
    NONE = "none"
    PREDEFINED = "predefined"
    CUSTOM = "custom"


@dataclass(frozen=True)
class LatteArtChoice:
    """Latte art selected by the customer"""
    kind: LatteArtKind = LatteArtKind.NONE
    design_id: Optional[int] = None
    image_path: str = ""

    @classmethod
    def none(cls) -> "LatteArtChoice":
        return cls()

    @classmethod
    def predefined(cls, design_id: int) -> "LatteArtChoice":
        return cls(kind=LatteArtKind.PREDEFINED, design_id=design_id)

    @classmethod
    def custom(cls, image_path: str) -> "LatteArtChoice":
        return cls(kind=LatteArtKind.CUSTOM, image_path=image_path)

    @classmethod
    def from_dict(cls, data: Any) -> "LatteArtChoice":
        """Decode latte art from a request.

        Accepts an object ({"kind": ..., "design_id": ..., "image_path": ...}),
        the literals "none" / "custom", or a bare design id.
        """
        if data is None or data == "":
            return cls.none()
        if isinstance(data, bool):
            raise InvalidSelectionError(f"latte_art must be an object, kind or design id, got {data!r}")
        if isinstance(data, int):
            return cls.predefined(data)
        if isinstance(data, str):
            text = data.strip().lower()
            if text == LatteArtKind.NONE.value:
                return cls.none()
            if text == LatteArtKind.CUSTOM.value:
                return cls.custom("")
            if text.isdigit():
                return cls.predefined(int(text))
            raise InvalidSelectionError(f"Unknown latte_art value: {data!r}")
        if not isinstance(data, dict):
            raise InvalidSelectionError(f"latte_art must be an object, kind or design id, got {data!r}")

        try:
            kind = LatteArtKind(data.get("kind") or LatteArtKind.NONE.value)
        except ValueError:
            raise InvalidSelectionError(f"Unknown latte_art kind: {data.get('kind')!r}")
        if kind == LatteArtKind.PREDEFINED:
            if data.get("design_id") is None:
                raise InvalidSelectionError("latte_art.design_id is required for a predefined design")
            try:
                return cls.predefined(parse_int(data["design_id"], 0, "latte_art.design_id"))
            except ValueError as e:
                raise InvalidSelectionError(str(e))
        if kind == LatteArtKind.CUSTOM:
            return cls.custom(data.get("image_path") or "")
        return cls.none()

    @property
    def is_selected(self) -> bool:
        return self.kind != LatteArtKind.NONE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "kind": self.kind.value,
            "design_id": self.design_id,
            "image_path": self.image_path
        }


@dataclass(frozen=True)
class CustomizationSelection:
    """Customer's customization choices for one order line"""
    bean_code: int = 1
    milk_code: int = 1
    ice: bool = False
    shots: int = 1
    latte_art: LatteArtChoice = field(default_factory=LatteArtChoice)

    @property
    def is_double_shot(self) -> bool:
        return self.shots == 2

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]],
                  defaults: Optional["CustomizationSelection"] = None) -> "CustomizationSelection":
        """Build a selection from request data, filling gaps (missing or null) from defaults"""
        base = defaults or cls()
        if data is None:
            return base
        if not isinstance(data, dict):
            raise InvalidSelectionError(f"selection must be an object, got {data!r}")
        try:
            return cls(
                bean_code=parse_int(data.get("bean_code"), base.bean_code, "bean_code"),
                milk_code=parse_int(data.get("milk_code"), base.milk_code, "milk_code"),
                ice=parse_bool(data.get("ice"), base.ice, "ice"),
                shots=parse_int(data.get("shots"), base.shots, "shots"),
                latte_art=(LatteArtChoice.from_dict(data["latte_art"])
                           if "latte_art" in data else base.latte_art)
            )
        except InvalidSelectionError:
            raise
        except ValueError as e:
            raise InvalidSelectionError(str(e))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "bean_code": self.bean_code,
            "milk_code": self.milk_code,
            "ice": self.ice,
            "shots": self.shots,
            "latte_art": self.latte_art.to_dict()
        }


@dataclass
class ProductDefinition:
    """Product data model as configured by staff"""
    id: Any
    name: str
    price: float
    type: ProductType = ProductType.COFFEE
    name_localized: str = ""
    required_ingredient_codes: List[str] = field(default_factory=list)
    # Raw stored template: JSON string or list of one-key dicts
    production_code_template: Any = field(default_factory=list)
    has_bean_options: bool = False
    has_milk_options: bool = False
    has_ice_options: bool = False
    has_shot_options: bool = False
    has_latte_art: bool = False
    default_bean_code: int = 1
    default_milk_code: int = 1
    default_ice: bool = True
    default_shots: int = 1
    iced_class_code: Optional[str] = None
    double_shot_class_code: Optional[str] = None
    iced_and_double_class_code: Optional[str] = None
    category: str = "Classics"

    def __post_init__(self):
        self.type = ProductType.from_value(self.type)
        # 빈 문자열 variant 코드는 미설정으로 취급
        self.iced_class_code = self.iced_class_code or None
        self.double_shot_class_code = self.double_shot_class_code or None
        self.iced_and_double_class_code = self.iced_and_double_class_code or None

    @property
    def has_any_options(self) -> bool:
        return (self.has_bean_options or self.has_milk_options or self.has_ice_options
                or self.has_shot_options or self.has_latte_art)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductDefinition":
        """Build a product from API or database dictionaries"""
        codes = parse_ingredient_codes(data.get("required_ingredient_codes"))
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            name_localized=data.get("name_localized", "") or "",
            price=float(data.get("price", 0)),
            type=data.get("type", ProductType.COFFEE.value),
            required_ingredient_codes=list(codes),
            production_code_template=data.get("production_code_template", []),
            has_bean_options=parse_bool(data.get("has_bean_options"), False, "has_bean_options"),
            has_milk_options=parse_bool(data.get("has_milk_options"), False, "has_milk_options"),
            has_ice_options=parse_bool(data.get("has_ice_options"), False, "has_ice_options"),
            has_shot_options=parse_bool(data.get("has_shot_options"), False, "has_shot_options"),
            has_latte_art=parse_bool(data.get("has_latte_art"), False, "has_latte_art"),
            default_bean_code=parse_int(data.get("default_bean_code"), 1, "default_bean_code"),
            default_milk_code=parse_int(data.get("default_milk_code"), 1, "default_milk_code"),
            default_ice=parse_bool(data.get("default_ice"), True, "default_ice"),
            default_shots=parse_int(data.get("default_shots"), 1, "default_shots"),
            iced_class_code=data.get("iced_class_code"),
            double_shot_class_code=data.get("double_shot_class_code"),
            iced_and_double_class_code=data.get("iced_and_double_class_code"),
            category=data.get("category") or "Classics"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "name_localized": self.name_localized,
            "price": self.price,
            "type": self.type.value,
            "required_ingredient_codes": list(self.required_ingredient_codes),
            "production_code_template": self.production_code_template,
            "has_bean_options": self.has_bean_options,
            "has_milk_options": self.has_milk_options,
            "has_ice_options": self.has_ice_options,
            "has_shot_options": self.has_shot_options,
            "has_latte_art": self.has_latte_art,
            "default_bean_code": self.default_bean_code,
            "default_milk_code": self.default_milk_code,
            "default_ice": self.default_ice,
            "default_shots": self.default_shots,
            "iced_class_code": self.iced_class_code,
            "double_shot_class_code": self.double_shot_class_code,
            "iced_and_double_class_code": self.iced_and_double_class_code,
            "category": self.category
        }
