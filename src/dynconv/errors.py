"""
ConversionError / ConversionResult - единый контракт ошибок конверсии

Один вид ошибки: «не удалось сконвертировать» + необязательная причина.
Никакой таксономии кодов ошибок, никакой агрегации нескольких ошибок:
первая ошибка прерывает текущий вызов.

Ошибки распространяются явно - каждая граница конверсии возвращает
ConversionResult, вызывающий код проверяет result.ok.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class ConversionError(Exception):
    """
    Значение не может быть сконвертировано в native тип или из него.

    Attributes:
        reason: Короткая диагностика (может отсутствовать)
    """

    DEFAULT_MESSAGE = "Conversion failed"

    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(reason or self.DEFAULT_MESSAGE)


@dataclass(frozen=True)
class ConversionResult(Generic[T]):
    """
    Результат одной конверсии: либо значение, либо ConversionError.

    Immutable (frozen=True). Создаётся через success() / failure().
    """

    value: T | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ConversionResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls, reason: "str | ConversionError | None" = None
    ) -> "ConversionResult[T]":
        """
        Неуспешный результат.

        Args:
            reason: Текст причины либо уже готовая ConversionError
        """
        if isinstance(reason, ConversionError):
            return cls(error=reason)
        return cls(error=ConversionError(reason))

    def unwrap(self) -> T:
        """
        Значение либо исключение.

        Raises:
            ConversionError: Если результат неуспешный
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]
