"""
Native type markers - фиксированные числовые типы и Shared handle

Python не различает int16/int32/int64 на уровне типов, поэтому ширина
задаётся через typing.Annotated:

    Int32 = Annotated[int, IntegerWidth(bits=32, signed=True)]

Конвертер выбирается по аннотации, значение при этом остаётся обычным int.
"""

from dataclasses import dataclass
from typing import Annotated, Final, Generic, TypeVar

T = TypeVar("T")


# =============================================================================
# WIDTH MARKERS
# =============================================================================


@dataclass(frozen=True)
class IntegerWidth:
    """Ширина и знаковость целого"""

    bits: int
    signed: bool


@dataclass(frozen=True)
class FloatWidth:
    """Ширина числа с плавающей точкой (32 или 64)"""

    bits: int


Int16 = Annotated[int, IntegerWidth(bits=16, signed=True)]
UInt16 = Annotated[int, IntegerWidth(bits=16, signed=False)]
Int32 = Annotated[int, IntegerWidth(bits=32, signed=True)]
UInt32 = Annotated[int, IntegerWidth(bits=32, signed=False)]
Int64 = Annotated[int, IntegerWidth(bits=64, signed=True)]
UInt64 = Annotated[int, IntegerWidth(bits=64, signed=False)]

Float32 = Annotated[float, FloatWidth(bits=32)]
Float64 = Annotated[float, FloatWidth(bits=64)]

# Plain int / float ведут себя как Int64 / Float64
DEFAULT_INTEGER_WIDTH: Final[IntegerWidth] = IntegerWidth(bits=64, signed=True)
DEFAULT_FLOAT_WIDTH: Final[FloatWidth] = FloatWidth(bits=64)

# Максимальное целое, точно представимое в double (2**53 - 1).
# 64-битные значения выше этого порога теряют точность при сохранении.
MAX_SAFE_INTEGER: Final[int] = 2**53 - 1


# =============================================================================
# SHARED HANDLE
# =============================================================================


class Shared(Generic[T]):
    """
    Shared-ownership handle над значением T.

    Загрузка в Shared[T] всегда создаёт новый handle со свежим экземпляром T
    и никогда не переиспользует существующий экземпляр.

    Сравнение - по содержимому; идентичность экземпляров проверяется через
    handle.value is other.value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T | None = None):
        self._value = value

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def is_empty(self) -> bool:
        return self._value is None

    def get(self) -> T:
        """
        Разыменование handle.

        Raises:
            ValueError: Если handle пустой
        """
        if self._value is None:
            raise ValueError("Shared handle is empty")
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shared):
            return NotImplemented
        return self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Shared({self._value!r})"
