"""
MemoryHost - in-memory host-движок

Фабрика динамических значений + scoped handles (аналог HandleScope).

Ядро конверсии работает с любым объектом, удовлетворяющим протоколу Host;
MemoryHost - реализация по умолчанию.
"""

from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from dynconv.host.values import (
    NULL,
    DynamicValue,
    JsArray,
    JsBoolean,
    JsNumber,
    JsObject,
    JsString,
)


class Host(Protocol):
    """Протокол host-движка, который требуется ядру"""

    def scope(self) -> ContextManager[None]: ...

    def new_null(self) -> DynamicValue: ...

    def new_boolean(self, value: bool) -> DynamicValue: ...

    def new_number(self, value: float) -> DynamicValue: ...

    def new_string(self, value: str) -> DynamicValue: ...

    def new_array(self) -> DynamicValue: ...

    def new_object(self) -> DynamicValue: ...


class MemoryHost:
    """
    Host-движок поверх dataclass-значений из dynconv.host.values.

    open_scopes - количество открытых в данный момент scope. После любого
    завершённого вызова конверсии (успешного или нет) должно быть 0.
    """

    def __init__(self):
        self.open_scopes = 0

    @contextmanager
    def scope(self) -> Iterator[None]:
        self.open_scopes += 1
        try:
            yield
        finally:
            self.open_scopes -= 1

    def new_null(self) -> DynamicValue:
        return NULL

    def new_boolean(self, value: bool) -> DynamicValue:
        return JsBoolean(value)

    def new_number(self, value: float) -> DynamicValue:
        return JsNumber(value)

    def new_string(self, value: str) -> DynamicValue:
        return JsString(value)

    def new_array(self) -> JsArray:
        return JsArray()

    def new_object(self) -> JsObject:
        return JsObject()
