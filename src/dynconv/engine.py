"""
ConversionEngine - разрешение конвертеров по типу + top-level entry points

Конвертер для native типа выбирается по аннотации типа один раз и
кэшируется. Выбор не зависит от конвертируемого значения: неподдерживаемый
тип даёт TypeError ещё до обращения к значению.

Порядок разрешения:
1. Явно зарегистрированный конвертер (register)
2. Annotated[int, IntegerWidth] / Annotated[float, FloatWidth]
3. bool / int / float / str
4. list[T] / deque[T] / dict[str, T] / Shared[T]
5. Enum с str или int значениями
6. Пользовательский тип с load/save hooks
"""

import logging
from collections import deque
from enum import Enum
from typing import Annotated, Any, TypeVar, get_args, get_origin

from dynconv.converters.aggregate import AggregateConverter, has_conversion_hooks
from dynconv.converters.base import ConversionCall, Converter
from dynconv.converters.containers import MappingConverter, SequenceConverter
from dynconv.converters.primitives import (
    BooleanConverter,
    EnumConverter,
    FloatConverter,
    IntegerConverter,
    StringConverter,
)
from dynconv.converters.shared import SharedConverter
from dynconv.errors import ConversionResult
from dynconv.host.memory import Host, MemoryHost
from dynconv.host.values import DynamicValue, HostError
from dynconv.settings import EngineSettings
from dynconv.types import (
    DEFAULT_FLOAT_WIDTH,
    DEFAULT_INTEGER_WIDTH,
    FloatWidth,
    IntegerWidth,
    Shared,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SEQUENCE_ORIGINS = {list: list, deque: deque}


def _is_hashable(native_type: Any) -> bool:
    try:
        hash(native_type)
    except TypeError:
        return False
    return True


class ConversionEngine:
    """
    Движок конверсии: host + настройки + кэш конвертеров.

    Кэш - единственное состояние, разделяемое между вызовами; все
    конвертеры в нём неизменяемы.
    """

    def __init__(self, host: Host | None = None, settings: EngineSettings | None = None):
        self.host = host if host is not None else MemoryHost()
        self.settings = settings or EngineSettings()
        self._registered: dict[Any, Converter] = {}
        self._cache: dict[Any, Converter] = {}

    # =========================================================================
    # REGISTRATION / RESOLUTION
    # =========================================================================

    def register(self, native_type: Any, converter: Converter) -> None:
        """
        Явный конвертер для типа (имеет приоритет над встроенными).

        Кэш сбрасывается целиком: уже разрешённые контейнеры могли
        захватить прежний конвертер элемента.
        """
        self._registered[native_type] = converter
        self._cache.clear()

    def converter_for(self, native_type: Any) -> Converter:
        """
        Конвертер для native типа.

        Raises:
            TypeError: Если тип не поддерживается
        """
        if not _is_hashable(native_type):
            # Annotated с нехешируемыми метаданными разрешается без кэша
            return self._resolve(native_type)

        converter = self._cache.get(native_type)
        if converter is None:
            converter = self._resolve(native_type)
            self._cache[native_type] = converter
            logger.debug("Resolved %r -> %r", native_type, converter)
        return converter

    def _resolve(self, native_type: Any) -> Converter:
        if _is_hashable(native_type) and native_type in self._registered:
            return self._registered[native_type]

        origin = get_origin(native_type)
        args = get_args(native_type)

        if origin is Annotated:
            return self._resolve_annotated(native_type, args)

        if native_type is bool:
            return BooleanConverter()
        if native_type is int:
            return IntegerConverter(int, DEFAULT_INTEGER_WIDTH)
        if native_type is float:
            return FloatConverter(float, DEFAULT_FLOAT_WIDTH)
        if native_type is str:
            return StringConverter()

        if origin in _SEQUENCE_ORIGINS:
            (element_type,) = args
            return SequenceConverter(
                native_type, _SEQUENCE_ORIGINS[origin], self.converter_for(element_type)
            )
        if origin is dict:
            key_type, value_type = args
            if key_type is not str:
                raise TypeError(f"Mapping keys must be str, got {key_type!r} in {native_type!r}")
            return MappingConverter(native_type, self.converter_for(value_type))
        if origin is Shared:
            (inner_type,) = args
            return SharedConverter(native_type, self.converter_for(inner_type))

        if native_type in (list, deque, dict, Shared):
            raise TypeError(
                f"{native_type.__name__} needs type parameters, e.g. {native_type.__name__}[int]"
            )

        if isinstance(native_type, type) and issubclass(native_type, Enum):
            return self._resolve_enum(native_type)

        if has_conversion_hooks(native_type):
            return AggregateConverter(native_type)

        raise TypeError(
            f"No converter for {native_type!r}: define load/save hooks or register a converter"
        )

    def _resolve_annotated(self, native_type: Any, args: tuple) -> Converter:
        base, *metadata = args
        for marker in metadata:
            if isinstance(marker, IntegerWidth) and base is int:
                return IntegerConverter(native_type, marker)
            if isinstance(marker, FloatWidth) and base is float:
                return FloatConverter(native_type, marker)
        # Прочие аннотации не влияют на конверсию
        return self.converter_for(base)

    def _resolve_enum(self, enum_type: type[Enum]) -> Converter:
        values = [member.value for member in enum_type]
        if values and all(isinstance(v, str) for v in values):
            return EnumConverter(enum_type, StringConverter())
        if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            return EnumConverter(enum_type, IntegerConverter(int, DEFAULT_INTEGER_WIDTH))
        raise TypeError(f"Enum {enum_type.__name__} must have all-str or all-int values")

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def to_native(self, value: DynamicValue, native_type: Any) -> ConversionResult[Any]:
        """
        DynamicValue -> native_type.

        Ошибки host-движка сводятся к ConversionError без причины.

        Raises:
            TypeError: Если тип не поддерживается
        """
        converter = self.converter_for(native_type)
        call = ConversionCall(self)
        with self.host.scope():
            try:
                return call.load(converter, value)
            except HostError as exc:
                logger.debug("Host error coalesced while loading %r: %s", native_type, exc)
                return ConversionResult.failure()

    def to_dynamic(self, value: Any, native_type: Any = None) -> ConversionResult[DynamicValue]:
        """
        native -> DynamicValue.

        Args:
            value: Native значение
            native_type: Native тип (по умолчанию type(value))

        Raises:
            TypeError: Если тип не поддерживается
        """
        if native_type is None:
            native_type = type(value)
        converter = self.converter_for(native_type)
        call = ConversionCall(self)
        with self.host.scope():
            try:
                return call.save(converter, value)
            except HostError as exc:
                logger.debug("Host error coalesced while saving %r: %s", native_type, exc)
                return ConversionResult.failure()


# Глобальный движок по умолчанию
_DEFAULT_ENGINE = ConversionEngine()


def default_engine() -> ConversionEngine:
    return _DEFAULT_ENGINE


def convert_to_native(
    value: DynamicValue, native_type: Any, engine: ConversionEngine | None = None
) -> ConversionResult[Any]:
    """
    Конверсия динамического значения в native тип.

    Args:
        value: Динамическое значение
        native_type: Целевой тип (int, Int32, list[str], Shared[Foo], ...)
        engine: Движок (по умолчанию глобальный)

    Returns:
        ConversionResult с полностью построенным значением либо ошибкой

    Raises:
        TypeError: Если тип не поддерживается
    """
    return (engine or _DEFAULT_ENGINE).to_native(value, native_type)


def convert_to_dynamic(
    value: Any, native_type: Any = None, engine: ConversionEngine | None = None
) -> ConversionResult[DynamicValue]:
    """
    Конверсия native значения в динамическое.

    Для встроенных типов всегда успешна при корректном native значении;
    пользовательский save может сообщить об ошибке.

    Raises:
        TypeError: Если тип не поддерживается
    """
    return (engine or _DEFAULT_ENGINE).to_dynamic(value, native_type)
