"""
AggregateConverter - пользовательские типы через load/save hooks

Тип без встроенного конвертера участвует в конверсии, если определяет:

    @staticmethod
    def load(context: LoadContext, target) -> ConversionResult | None
    @staticmethod
    def save(context: SaveContext, source) -> ConversionResult | None

Наличие hooks проверяется при разрешении конвертера (до конверсии
каких-либо значений). Тип без hooks -> TypeError, а не ConversionError.

Hook может вернуть None (успех), ConversionResult или выбросить
ConversionError (например, через result.unwrap()) - исключение
перехватывается здесь же, на границе hook.
"""

from typing import Any, Callable, Protocol, runtime_checkable

from dynconv.context import LoadContext, SaveContext
from dynconv.converters.base import ConversionCall, Converter
from dynconv.errors import ConversionError, ConversionResult
from dynconv.host.values import DynamicValue


@runtime_checkable
class Convertible(Protocol):
    """Протокол пользовательского типа"""

    @staticmethod
    def load(context: LoadContext, target: Any) -> "ConversionResult | None": ...

    @staticmethod
    def save(context: SaveContext, source: Any) -> "ConversionResult | None": ...


def has_conversion_hooks(native_type: Any) -> bool:
    return (
        isinstance(native_type, type)
        and callable(getattr(native_type, "load", None))
        and callable(getattr(native_type, "save", None))
    )


def _invoke_hook(hook: Callable, context: Any, subject: Any) -> ConversionResult[None]:
    try:
        outcome = hook(context, subject)
    except ConversionError as exc:
        return ConversionResult.failure(exc)
    finally:
        context.close()

    if isinstance(outcome, ConversionResult):
        return outcome
    return ConversionResult.success(None)


class AggregateConverter(Converter[Any]):
    """
    Пользовательский тип <-> object.

    Загрузка: требует object, создаёт новый экземпляр через native_type()
    и передаёт его в native_type.load вместе с LoadContext.
    Сохранение: создаёт пустой object и передаёт его в native_type.save
    через SaveContext.
    """

    def __init__(self, native_type: type):
        self.native_type = native_type

    def from_dynamic(self, value: DynamicValue, call: ConversionCall) -> ConversionResult[Any]:
        if not value.is_object():
            return ConversionResult.failure(
                f"expected object for {self.native_type.__name__}, got {value.kind.value}"
            )

        target = self.native_type()
        outcome = _invoke_hook(self.native_type.load, LoadContext(value, call), target)
        if not outcome.ok:
            return outcome
        return ConversionResult.success(target)

    def to_dynamic(self, native: Any, call: ConversionCall) -> ConversionResult[DynamicValue]:
        if not isinstance(native, self.native_type):
            return ConversionResult.failure(
                f"expected {self.native_type.__name__}, got {type(native).__name__}"
            )

        obj = call.host.new_object()
        outcome = _invoke_hook(self.native_type.save, SaveContext(obj, call), native)
        if not outcome.ok:
            return outcome
        return ConversionResult.success(obj)
