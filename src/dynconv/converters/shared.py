"""
SharedConverter - конвертер для Shared[T] (ownership wrapper)

Загрузка ВСЕГДА создаёт новый handle со свежим экземпляром T: предыдущий
экземпляр не переиспользуется, идентичность не сохраняется.
Сохранение разыменовывает handle и делегирует конвертеру T.

null/undefined проверяются на границе handle:
- по умолчанию -> ConversionError("value is absent (null or undefined)")
- EngineSettings.allow_empty_shared=True -> пустой handle (и обратно: null)
"""

from typing import Any

from dynconv.converters.base import ConversionCall, Converter
from dynconv.errors import ConversionResult
from dynconv.host.values import DynamicValue
from dynconv.types import Shared

ABSENT_REASON = "value is absent (null or undefined)"


class SharedConverter(Converter[Shared]):
    def __init__(self, native_type: Any, inner_converter: Converter):
        self.native_type = native_type
        self.inner_converter = inner_converter

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[Shared]:
        if value.is_nullish():
            if call.settings.allow_empty_shared:
                return ConversionResult.success(Shared())
            return ConversionResult.failure(ABSENT_REASON)

        result = call.load(self.inner_converter, value)
        if not result.ok:
            return result
        return ConversionResult.success(Shared(result.value))

    def to_dynamic(self, native: Shared, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, Shared):
            return ConversionResult.failure(f"expected Shared, got {type(native).__name__}")

        if native.is_empty:
            if call.settings.allow_empty_shared:
                return ConversionResult.success(call.host.new_null())
            return ConversionResult.failure("shared handle is empty")

        return call.save(self.inner_converter, native.value)
