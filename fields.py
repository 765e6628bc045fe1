# fields.py
"""
Total lookups into loosely shaped JSON records.

Shopify omits keys, sends nulls, and occasionally sends a string where a
sub-record is expected. ``Field`` wraps one level of such a record; every hop
returns another ``Field`` (possibly empty), so a chain never raises and the
default is always spelled out at the end of the chain:

    Field(order).get("customer").get("default_address").text("phone")
"""

from typing import Any, Iterable, List, Optional


class Field:
    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self):
        return f"Field({self.value!r})"

    @property
    def present(self) -> bool:
        return self.value is not None

    def get(self, key: str) -> "Field":
        """Step into a sub-record; anything that is not a mapping is absent."""
        if isinstance(self.value, dict):
            return Field(self.value.get(key))
        return Field(None)

    def raw(self, key: str, default: Any = None) -> Any:
        value = self.get(key).value
        return default if value is None else value

    def text(self, key: Optional[str] = None, default: str = "") -> str:
        value = self.value if key is None else self.get(key).value
        if value is None:
            return default
        return str(value).strip()

    def items(self, key: str) -> List["Field"]:
        """List-valued field as a list of Fields; absent or non-list -> []."""
        value = self.get(key).value
        if not isinstance(value, (list, tuple)):
            return []
        return [Field(v) for v in value]


def first_text(candidates: Iterable[Field], default: str = "") -> str:
    """First non-empty text among the candidates, in order."""
    for candidate in candidates:
        value = candidate.text()
        if value:
            return value
    return default
