"""Enum conversion utilities used by config loading and the CLI"""

from enum import Enum
from typing import TypeVar, Type, Optional, List, Any

# Generic type for any Enum subclass
E = TypeVar("E", bound=Enum)

class EnumHelper:
    """
    Utility class for working with Enums:
    - Parse strings back to enum members (case-insensitive, by name or wire value)
    - List all member names
    """

    @staticmethod
    def from_string(enum_class: Type[E], name: str, case_insensitive: bool = True,
                    default: Optional[E] = None) -> Optional[E]:
        """
        Parse string to Enum member.

        Args:
            enum_class: Enum class to parse into
            name: Member name, e.g. "sysfs" for BackendType.SYSFS
            case_insensitive: If True, matches ignoring case
            default: Return value if not found (None = raise)

        Returns:
            Enum member or default if provided
        """
        if not issubclass(enum_class, Enum):
            raise TypeError(f"{enum_class} is not an Enum class")

        name = str(name).strip()
        if case_insensitive:
            name = name.upper()

        for member in enum_class:
            if (member.name.upper() if case_insensitive else member.name) == name:
                return member

        if default is not None:
            return default
        raise ValueError(f"Invalid {enum_class.__name__} name: {name}")

    @staticmethod
    def list_names(enum_class: Type[E], lowercase: bool = False) -> List[str]:
        """List all Enum member names (CLI choices, error messages)."""
        if not issubclass(enum_class, Enum):
            raise TypeError(f"{enum_class} is not an Enum class")

        if lowercase:
            return [member.name.lower() for member in enum_class]
        return [member.name for member in enum_class]

    @staticmethod
    def to_enum(enum_class: Type[E], value: Any) -> E:
        """
        Convert a config / CLI value to an enum instance.

        Accepts an instance, a member name ("HIGH", "p8_03") or a wire
        value ("1", "out").
        """
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str):
            try:
                return enum_class[value.strip().upper()]
            except KeyError:
                pass
            for member in enum_class:
                if member.value == value.strip():
                    return member
            raise ValueError(f"Invalid enum value '{value}' for {enum_class.__name__}")
        raise TypeError(f"Expected str or {enum_class.__name__}, got {type(value)}")
