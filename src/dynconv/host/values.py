"""
Dynamic values - модель значений host-движка

Минимальная in-memory модель динамически типизированных значений
(undefined / null / boolean / number / string / array / object).

Ядро конверсии использует только:
- проверку типа значения (kind)
- индексный доступ к массиву + длину
- get/set свойств объекта по строковому ключу + перечисление собственных ключей

Числа хранятся как IEEE double - как в любом JS-подобном движке.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator


# =============================================================================
# ENUMS / ERRORS
# =============================================================================


class ValueKind(str, Enum):
    """Тег типа динамического значения"""

    UNDEFINED = "undefined"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class HostError(Exception):
    """
    Ошибка, выброшенная самим host-движком (например, getter свойства упал).

    Ядро никогда не пропускает HostError наружу: на границах вызова она
    превращается в ConversionError.
    """


def to_double(number: int | float) -> float:
    """
    Число -> IEEE double.

    Целые за пределами диапазона double становятся ±inf.

    Examples:
        >>> to_double(10**400)
        inf
    """
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


# =============================================================================
# BASE VALUE
# =============================================================================


class DynamicValue:
    """
    Базовый класс динамического значения.

    Методы доступа к содержимому по умолчанию выбрасывают HostError -
    каждый подкласс переопределяет только то, что ему свойственно.
    """

    kind: ClassVar[ValueKind]

    # Проверка типа

    def is_undefined(self) -> bool:
        return self.kind is ValueKind.UNDEFINED

    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def is_nullish(self) -> bool:
        """True для null и undefined"""
        return self.kind in (ValueKind.NULL, ValueKind.UNDEFINED)

    def is_boolean(self) -> bool:
        return self.kind is ValueKind.BOOLEAN

    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    def is_object(self) -> bool:
        return self.kind is ValueKind.OBJECT

    # Доступ к примитивам

    def boolean_value(self) -> bool:
        raise HostError(f"{self.kind.value} is not a boolean")

    def number_value(self) -> float:
        raise HostError(f"{self.kind.value} is not a number")

    def string_value(self) -> str:
        raise HostError(f"{self.kind.value} is not a string")

    # Доступ к массиву

    def length(self) -> int:
        raise HostError(f"{self.kind.value} is not an array")

    def get_index(self, index: int) -> "DynamicValue":
        raise HostError(f"{self.kind.value} is not an array")

    def append(self, value: "DynamicValue") -> None:
        raise HostError(f"{self.kind.value} is not an array")

    # Доступ к объекту

    def get(self, key: str) -> "DynamicValue":
        raise HostError(f"{self.kind.value} is not an object")

    def set(self, key: str, value: "DynamicValue") -> None:
        raise HostError(f"{self.kind.value} is not an object")

    def own_keys(self) -> list[str]:
        raise HostError(f"{self.kind.value} is not an object")


# =============================================================================
# PRIMITIVES
# =============================================================================


@dataclass(frozen=True)
class JsUndefined(DynamicValue):
    kind: ClassVar[ValueKind] = ValueKind.UNDEFINED


@dataclass(frozen=True)
class JsNull(DynamicValue):
    kind: ClassVar[ValueKind] = ValueKind.NULL


@dataclass(frozen=True)
class JsBoolean(DynamicValue):
    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

    def boolean_value(self) -> bool:
        return self.value


@dataclass(frozen=True)
class JsNumber(DynamicValue):
    """Число host-движка (всегда double)"""

    value: float
    kind: ClassVar[ValueKind] = ValueKind.NUMBER

    def __post_init__(self):
        object.__setattr__(self, "value", to_double(self.value))

    def number_value(self) -> float:
        return self.value


@dataclass(frozen=True)
class JsString(DynamicValue):
    value: str
    kind: ClassVar[ValueKind] = ValueKind.STRING

    def string_value(self) -> str:
        return self.value


# Синглтоны
UNDEFINED = JsUndefined()
NULL = JsNull()


# =============================================================================
# ARRAY / OBJECT
# =============================================================================


@dataclass
class JsArray(DynamicValue):
    """
    Массив host-движка.

    Чтение за пределами длины возвращает undefined (как в JS).
    """

    items: list[DynamicValue] = field(default_factory=list)
    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    def length(self) -> int:
        return len(self.items)

    def get_index(self, index: int) -> DynamicValue:
        if 0 <= index < len(self.items):
            return self.items[index]
        return UNDEFINED

    def set_index(self, index: int, value: DynamicValue) -> None:
        """Запись по индексу; дыры заполняются undefined"""
        if index < 0:
            raise HostError(f"Invalid array index: {index}")
        while len(self.items) <= index:
            self.items.append(UNDEFINED)
        self.items[index] = value

    def append(self, value: DynamicValue) -> None:
        self.items.append(value)

    def __iter__(self) -> Iterator[DynamicValue]:
        return iter(self.items)


@dataclass
class JsObject(DynamicValue):
    """
    Объект host-движка.

    Отсутствующее свойство читается как undefined. Порядок ключей
    не является частью контракта.
    """

    properties: dict[str, DynamicValue] = field(default_factory=dict)
    kind: ClassVar[ValueKind] = ValueKind.OBJECT

    def get(self, key: str) -> DynamicValue:
        return self.properties.get(key, UNDEFINED)

    def set(self, key: str, value: DynamicValue) -> None:
        self.properties[key] = value

    def own_keys(self) -> list[str]:
        return list(self.properties)

    def has(self, key: str) -> bool:
        return key in self.properties
