"""
LoadContext / SaveContext - посредники при конверсии пользовательских типов

Передаются в T.load / T.save. Пользователь никогда не создаёт их сам.

LoadContext.get(name, T)            -> ConversionResult[T]
LoadContext.get(name, T, default)   -> T (никогда не падает)
SaveContext.set(name, value, T)     -> ConversionResult[None]

Контекст живёт только в пределах одного вызова hook: после возврата из
load/save он закрывается, и любое дальнейшее обращение даёт ConversionError.
"""

import logging
from typing import Any, TypeVar, overload

from dynconv.converters.base import ConversionCall
from dynconv.errors import ConversionResult
from dynconv.host.values import DynamicValue, HostError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()

CLOSED_REASON = "context used outside of its conversion call"


class LoadContext:
    """
    Чтение полей из одного динамического значения.

    Attributes:
        value: Оборачиваемое значение (только чтение)
    """

    def __init__(self, value: DynamicValue, call: ConversionCall):
        self.value = value
        self._call = call
        self._closed = False

    def close(self) -> None:
        self._closed = True

    @overload
    def get(self, name: str, native_type: Any) -> ConversionResult[Any]: ...

    @overload
    def get(self, name: str, native_type: Any, default: T) -> T: ...

    def get(self, name, native_type, default=_MISSING):
        """
        Конверсия свойства name в native_type.

        Без default возвращает ConversionResult. С default возвращает значение
        и при ЛЮБОЙ ошибке (нет свойства, не тот тип, ошибка где угодно
        во вложенной конверсии) подставляет default.

        Args:
            name: Имя свойства
            native_type: Целевой native тип
            default: Значение по умолчанию

        Raises:
            TypeError: Если для native_type нет конвертера (ошибка программиста,
                default её не перехватывает)
        """
        result = self._get(name, native_type)
        if default is _MISSING:
            return result

        if not result.ok:
            logger.debug("Field %r fell back to default: %s", name, result.error)
            return default
        return result.value

    def _get(self, name: str, native_type: Any) -> ConversionResult[Any]:
        if self._closed:
            return ConversionResult.failure(CLOSED_REASON)

        call = self._call
        converter = call.converter_for(native_type)

        with call.host.scope():
            try:
                if not self.value.is_object():
                    return ConversionResult.failure(
                        f"cannot read field {name!r} from {self.value.kind.value}"
                    )
                child = self.value.get(name)
                if child.is_undefined():
                    return ConversionResult.failure(f"missing field {name!r}")
                return call.load(converter, child)
            except HostError as exc:
                logger.debug("Host error while reading field %r: %s", name, exc)
                return ConversionResult.failure(f"host error while reading field {name!r}")


class SaveContext:
    """
    Запись полей в один объект host-движка.

    Attributes:
        target: Объект, в который пишутся поля
    """

    def __init__(self, target: DynamicValue | None, call: ConversionCall):
        self.target = target
        self._call = call
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def set(self, name: str, value: Any, native_type: Any = None) -> ConversionResult[None]:
        """
        Конверсия value и запись в свойство name.

        Ошибки вложенной конверсии распространяются (default при сохранении нет).

        Args:
            name: Имя свойства
            value: Native значение
            native_type: Native тип (по умолчанию type(value); для
                list/dict/Shared обязателен параметризованный тип)

        Raises:
            TypeError: Если для типа нет конвертера
        """
        if self._closed:
            return ConversionResult.failure(CLOSED_REASON)
        if self.target is None or not self.target.is_object():
            return ConversionResult.failure("save context is not bound to an object")

        call = self._call
        converter = call.converter_for(native_type if native_type is not None else type(value))

        with call.host.scope():
            try:
                result = call.save(converter, value)
                if not result.ok:
                    return result
                self.target.set(name, result.value)
            except HostError as exc:
                logger.debug("Host error while writing field %r: %s", name, exc)
                return ConversionResult.failure(f"host error while writing field {name!r}")

        return ConversionResult.success(None)
