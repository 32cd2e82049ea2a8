from types import MappingProxyType
from typing import Dict, Iterable, Optional, Tuple


class Person:
    """
    A person record as a bag of attribute names and values.

    Values are always stored as tuples, even for single valued attributes.
    The record cannot be changed once it has been constructed.
    """

    def __init__(self, uid: str, attributes: Optional[Dict[str, Iterable[str]]] = None):
        """Create a Person

        Args:
            uid (str): Identifier the person was looked up by.
            attributes (dict, optional): Attribute name to values. A plain string
                is treated as a single value. Defaults to None.
        """
        self._uid = uid
        values = {}
        for name, value in (attributes or {}).items():
            values[name] = (value,) if isinstance(value, str) else tuple(value)
        self._attributes = MappingProxyType(values)

    @property
    def uid(self) -> str:
        return self._uid

    def attribute_names(self) -> frozenset:
        return frozenset(self._attributes)

    def attribute_value(self, name: str) -> Optional[str]:
        """Get the first value of an attribute

        Args:
            name (str): Attribute name, case sensitive.

        Returns:
            str: The first value, or None if the attribute is absent or empty.
        """
        values = self._attributes.get(name)
        return values[0] if values else None

    def attribute_values(self, name: str) -> Tuple[str, ...]:
        return self._attributes.get(name, ())

    def to_dict(self) -> Dict[str, list]:
        return {name: list(values) for name, values in self._attributes.items()}

    def __contains__(self, name):
        return name in self._attributes

    def __eq__(self, other):
        if not isinstance(other, Person):
            return NotImplemented
        return self._uid == other._uid and dict(self._attributes) == dict(other._attributes)

    def __repr__(self):
        return f"Person(uid={self._uid!r}, attributes={self.to_dict()!r})"
