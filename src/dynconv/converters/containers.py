"""
Container converters - упорядоченные последовательности и текстовые маппинги

SequenceConverter: list[T], deque[T] <-> array
MappingConverter: dict[str, T] <-> object

Загрузка all-or-nothing: элементы собираются во временный список / dict,
и native контейнер создаётся только после успешной конверсии ВСЕХ
элементов. При ошибке вызывающий код не получает частично заполненный
контейнер.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Callable

from dynconv.converters.base import ConversionCall, Converter
from dynconv.errors import ConversionResult
from dynconv.host.values import DynamicValue


class SequenceConverter(Converter[Any]):
    """
    Упорядоченная последовательность <-> array.

    Порядок элементов сохраняется в обе стороны.
    """

    def __init__(
        self,
        native_type: Any,
        factory: Callable[[list], Any],
        element_converter: Converter,
    ):
        """
        Args:
            native_type: Полный тип (например, list[Int32])
            factory: Конструктор контейнера из списка (list, deque)
            element_converter: Конвертер элемента
        """
        self.native_type = native_type
        self.factory = factory
        self.element_converter = element_converter

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[Any]:
        if not value.is_array():
            return ConversionResult.failure(f"expected array, got {value.kind.value}")

        staged = []
        for index in range(value.length()):
            result = call.load(self.element_converter, value.get_index(index))
            if not result.ok:
                return result
            staged.append(result.value)

        return ConversionResult.success(self.factory(staged))

    def to_dynamic(self, native: Any, call: ConversionCall) -> ConversionResult[DynamicValue]:
        # только упорядоченные последовательности
        if isinstance(native, (str, bytes)) or not isinstance(native, Sequence):
            return ConversionResult.failure(
                f"expected a sequence, got {type(native).__name__}"
            )

        array = call.host.new_array()
        for element in native:
            result = call.save(self.element_converter, element)
            if not result.ok:
                return result
            array.append(result.value)
        return ConversionResult.success(array)


class MappingConverter(Converter[dict]):
    """
    dict[str, T] <-> object.

    Порядок ключей не является частью контракта: round-trip сохраняет
    содержимое, но не порядок перечисления.
    """

    def __init__(self, native_type: Any, value_converter: Converter):
        self.native_type = native_type
        self.value_converter = value_converter

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[dict]:
        if not value.is_object():
            return ConversionResult.failure(f"expected object, got {value.kind.value}")

        staged: dict[str, Any] = {}
        for key in value.own_keys():
            result = call.load(self.value_converter, value.get(key))
            if not result.ok:
                return result
            # last write wins
            staged[str(key)] = result.value

        return ConversionResult.success(staged)

    def to_dynamic(self, native: dict, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, Mapping):
            return ConversionResult.failure(f"expected a mapping, got {type(native).__name__}")

        obj = call.host.new_object()
        for key, item in native.items():
            if not isinstance(key, str):
                return ConversionResult.failure(
                    f"mapping keys must be str, got {type(key).__name__}"
                )
            result = call.save(self.value_converter, item)
            if not result.ok:
                return result
            obj.set(key, result.value)
        return ConversionResult.success(obj)
