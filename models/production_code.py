"""
Production code document data models

The machine receives its recipe parameters as a JSON array of one-key
objects, e.g. [{"classCode": "5001"}, {"CupCode": "2"}]. The document keeps
that shape as an ordered list of (key, value) pairs with one entry per key.
"""
import json
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple, Iterator


class ProductionCodeDocument:
    """Ordered list of single-key production codes"""

    def __init__(self, entries: Optional[List[Tuple[str, str]]] = None):
        self._entries: List[Tuple[str, str]] = []
        for key, value in entries or []:
            self.upsert(key, value)

    def _index_of(self, key: str) -> int:
        for index, (existing_key, _) in enumerate(self._entries):
            if existing_key == key:
                return index
        return -1

    def get(self, key: str) -> Optional[str]:
        index = self._index_of(key)
        return self._entries[index][1] if index >= 0 else None

    def upsert(self, key: str, value: Any) -> None:
        """Replace the value in place, or append a new entry at the end."""
        index = self._index_of(key)
        if index >= 0:
            self._entries[index] = (key, str(value))
        else:
            self._entries.append((key, str(value)))

    def upsert_first(self, key: str, value: Any) -> None:
        """Replace the value in place, or insert a new entry at the front."""
        index = self._index_of(key)
        if index >= 0:
            self._entries[index] = (key, str(value))
        else:
            self._entries.insert(0, (key, str(value)))

    def remove(self, key: str) -> bool:
        index = self._index_of(key)
        if index < 0:
            return False
        del self._entries[index]
        return True

    def keys(self) -> List[str]:
        return [key for key, _ in self._entries]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries)

    def copy(self) -> "ProductionCodeDocument":
        return ProductionCodeDocument(self._entries)

    def to_list(self) -> List[Dict[str, str]]:
        """Wire shape: one dict per entry, never merged"""
        return [{key: value} for key, value in self._entries]

    def to_json(self) -> str:
        return json.dumps(self.to_list(), ensure_ascii=False)

    @classmethod
    def from_list(cls, items: List[Dict[str, Any]]) -> "ProductionCodeDocument":
        document = cls()
        for item in items:
            for key, value in item.items():
                document.upsert(key, value)
        return document

    def __contains__(self, key: str) -> bool:
        return self._index_of(key) >= 0

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductionCodeDocument):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"ProductionCodeDocument({self.to_list()!r})"


@dataclass
class TemplateParseResult:
    """Result of parsing a stored production code template"""
    success: bool
    document: ProductionCodeDocument = field(default_factory=ProductionCodeDocument)
    error: Optional[str] = None


@dataclass
class ProductionCodeLabel:
    """Human readable production code for the order monitor"""
    type: str
    value: str
    label: str
    is_primary: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "type": self.type,
            "value": self.value,
            "label": self.label,
            "is_primary": self.is_primary
        }
