"""
Primitive converters - целые фиксированной ширины, float, bool, str, Enum

Листья рекурсии: ни один из конвертеров не обращается к другим
(кроме EnumConverter, который делегирует конвертеру значения члена).

Числовое приведение повторяет приведение host-движка, а НЕ строгую
проверку диапазона:
- ToInt32 / ToUint32: NaN/Inf -> 0, отбрасывание дробной части,
  перенос по модулю 2**32
- 16-битные типы: ToInt32 / ToUint32 + сужение до 16 бит (two's complement)
- 64-битные: отбрасывание дробной части, NaN -> 0, насыщение на границах int64;
  UInt64 - тот же int64, переинтерпретированный по модулю 2**64

При сохранении 64-битные значения пишутся как double: всё, что выше
MAX_SAFE_INTEGER, теряет точность. Это ожидаемое поведение.
"""

import math
import struct
from enum import Enum
from typing import Any

from dynconv.converters.base import ConversionCall, Converter
from dynconv.errors import ConversionResult
from dynconv.host.values import DynamicValue, to_double
from dynconv.types import FloatWidth, IntegerWidth

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


# =============================================================================
# ЧИСЛОВОЕ ПРИВЕДЕНИЕ
# =============================================================================


def wrap_integer(value: int, bits: int, signed: bool) -> int:
    """
    Сужение целого до bits бит (two's complement).

    Examples:
        >>> wrap_integer(70000, 16, True)
        4464
        >>> wrap_integer(-1, 16, False)
        65535
    """
    modulus = 1 << bits
    value %= modulus
    if signed and value >= modulus >> 1:
        value -= modulus
    return value


def to_int32(number: float) -> int:
    """ECMAScript ToInt32"""
    if math.isnan(number) or math.isinf(number):
        return 0
    return wrap_integer(int(number), 32, True)


def to_uint32(number: float) -> int:
    """ECMAScript ToUint32"""
    if math.isnan(number) or math.isinf(number):
        return 0
    return wrap_integer(int(number), 32, False)


def to_int64(number: float) -> int:
    """Приведение double -> int64 с насыщением (NaN -> 0)"""
    if math.isnan(number):
        return 0
    if number >= 2.0**63:
        return _INT64_MAX
    if number < -(2.0**63):
        return _INT64_MIN
    return int(number)


def to_float32(number: float) -> float:
    """Округление до IEEE single precision; переполнение -> ±inf"""
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def coerce_integer(number: float, width: IntegerWidth) -> int:
    """double -> целое заданной ширины по правилам host-движка"""
    if width.bits <= 32:
        base = to_int32(number) if width.signed else to_uint32(number)
        return wrap_integer(base, width.bits, width.signed)
    base = to_int64(number)
    if width.signed:
        return base
    return wrap_integer(base, 64, False)


def _is_plain_number(native: Any) -> bool:
    # bool - подкласс int, но не число в смысле конверсии
    return isinstance(native, (int, float)) and not isinstance(native, bool)


def _kind_mismatch(expected: str, value: DynamicValue) -> ConversionResult:
    return ConversionResult.failure(f"expected {expected}, got {value.kind.value}")


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


class IntegerConverter(Converter[int]):
    """Целое фиксированной ширины <-> number"""

    def __init__(self, native_type: Any, width: IntegerWidth):
        self.native_type = native_type
        self.width = width

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[int]:
        if not value.is_number():
            return _kind_mismatch("number", value)
        return ConversionResult.success(coerce_integer(value.number_value(), self.width))

    def to_dynamic(self, native: int, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, int) or isinstance(native, bool):
            return ConversionResult.failure(f"expected int, got {type(native).__name__}")
        narrowed = wrap_integer(native, self.width.bits, self.width.signed)
        return ConversionResult.success(call.host.new_number(float(narrowed)))


class FloatConverter(Converter[float]):
    """float / Float32 <-> number"""

    def __init__(self, native_type: Any, width: FloatWidth):
        self.native_type = native_type
        self.width = width

    def _narrow(self, number: float) -> float:
        if self.width.bits == 32:
            return to_float32(number)
        return number

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[float]:
        if not value.is_number():
            return _kind_mismatch("number", value)
        return ConversionResult.success(self._narrow(value.number_value()))

    def to_dynamic(self, native: float, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not _is_plain_number(native):
            return ConversionResult.failure(f"expected float, got {type(native).__name__}")
        return ConversionResult.success(call.host.new_number(self._narrow(to_double(native))))


class BooleanConverter(Converter[bool]):
    native_type = bool

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[bool]:
        if not value.is_boolean():
            return _kind_mismatch("boolean", value)
        return ConversionResult.success(value.boolean_value())

    def to_dynamic(self, native: bool, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, bool):
            return ConversionResult.failure(f"expected bool, got {type(native).__name__}")
        return ConversionResult.success(call.host.new_boolean(native))


class StringConverter(Converter[str]):
    native_type = str

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[str]:
        if not value.is_string():
            return _kind_mismatch("string", value)
        return ConversionResult.success(value.string_value())

    def to_dynamic(self, native: str, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, str):
            return ConversionResult.failure(f"expected str, got {type(native).__name__}")
        return ConversionResult.success(call.host.new_string(native))


class EnumConverter(Converter[Enum]):
    """
    Enum <-> значение члена.

    Значения членов должны быть либо все str, либо все int - тогда
    используется StringConverter / IntegerConverter(Int64).
    """

    def __init__(self, native_type: type[Enum], value_converter: Converter):
        self.native_type = native_type
        self.value_converter = value_converter

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[Enum]:
        raw = self.value_converter.from_dynamic(value, call)
        if not raw.ok:
            return raw
        try:
            return ConversionResult.success(self.native_type(raw.value))
        except ValueError:
            return ConversionResult.failure(
                f"{raw.value!r} is not a valid {self.native_type.__name__}"
            )

    def to_dynamic(self, native: Enum, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, self.native_type):
            return ConversionResult.failure(
                f"expected {self.native_type.__name__}, got {type(native).__name__}"
            )
        return self.value_converter.to_dynamic(native.value, call)
