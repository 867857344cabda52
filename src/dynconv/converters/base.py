"""
Converter - базовый протокол конвертера + состояние одного вызова

Converter - пара операций (from_dynamic, to_dynamic) для одного native типа.
ConversionCall - состояние одного top-level вызова: host, настройки,
текущая глубина рекурсии. Передаётся явно в каждый рекурсивный вызов
и не хранится дольше этого вызова.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from dynconv.errors import ConversionResult
from dynconv.host.values import DynamicValue

if TYPE_CHECKING:
    from dynconv.engine import ConversionEngine

T = TypeVar("T")


class Converter(ABC, Generic[T]):
    """
    Конвертер для одного native типа.

    Оба метода возвращают ConversionResult и никогда не выбрасывают
    ConversionError. Рекурсия во вложенные конвертеры идёт через
    call.load() / call.save(), чтобы учитывалась глубина.
    """

    native_type: Any = None

    @abstractmethod
    def from_dynamic(self, value: DynamicValue, call: "ConversionCall") -> ConversionResult[T]:
        """DynamicValue -> T"""

    @abstractmethod
    def to_dynamic(self, native: T, call: "ConversionCall") -> ConversionResult[DynamicValue]:
        """T -> DynamicValue"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.native_type!r})"


class ConversionCall:
    """
    Состояние одного top-level вызова конверсии.

    Attributes:
        engine: Движок (источник конвертеров)
        host: Host-движок (фабрика значений, scopes)
        settings: EngineSettings движка
        depth: Текущая глубина рекурсии
    """

    def __init__(self, engine: "ConversionEngine"):
        self.engine = engine
        self.host = engine.host
        self.settings = engine.settings
        self.depth = 0

    def converter_for(self, native_type: Any) -> Converter:
        """
        Raises:
            TypeError: Если для типа нет конвертера
        """
        return self.engine.converter_for(native_type)

    def load(self, converter: Converter[T], value: DynamicValue) -> ConversionResult[T]:
        """Рекурсивная загрузка с контролем глубины"""
        if self.depth >= self.settings.max_depth:
            return ConversionResult.failure(
                f"maximum nesting depth {self.settings.max_depth} exceeded"
            )
        self.depth += 1
        try:
            return converter.from_dynamic(value, self)
        finally:
            self.depth -= 1

    def save(self, converter: Converter[T], native: T) -> ConversionResult[DynamicValue]:
        """Рекурсивное сохранение с контролем глубины"""
        if self.depth >= self.settings.max_depth:
            return ConversionResult.failure(
                f"maximum nesting depth {self.settings.max_depth} exceeded"
            )
        self.depth += 1
        try:
            return converter.to_dynamic(native, self)
        finally:
            self.depth -= 1
