"""
JSON bridge - преобразование JSON / plain Python <-> dynamic values

Внешний по отношению к ядру слой: только поставляет и потребляет
DynamicValue. Использует стандартный модуль json.

Маппинг:
- None <-> null
- bool <-> boolean
- int / float <-> number (int превращается в double, возможна потеря точности;
  целые вне диапазона double становятся ±inf, как в JSON.parse)
- str <-> string
- list / tuple <-> array
- dict <-> object (ключи приводятся к str)

undefined при выгрузке: свойства объекта пропускаются, элементы массива
становятся None (поведение JSON.stringify).
"""

import json
from typing import Any

from dynconv.host.values import (
    NULL,
    DynamicValue,
    JsArray,
    JsBoolean,
    JsNumber,
    JsObject,
    JsString,
    ValueKind,
    to_double,
)


def from_python(data: Any) -> DynamicValue:
    """
    Plain Python (результат json.load) -> DynamicValue.

    Raises:
        TypeError: Если встретился тип, не представимый в JSON
    """
    if data is None:
        return NULL
    # bool проверяем до int: bool - подкласс int
    if isinstance(data, bool):
        return JsBoolean(data)
    if isinstance(data, (int, float)):
        return JsNumber(to_double(data))
    if isinstance(data, str):
        return JsString(data)
    if isinstance(data, (list, tuple)):
        return JsArray([from_python(item) for item in data])
    if isinstance(data, dict):
        return JsObject({str(key): from_python(value) for key, value in data.items()})
    raise TypeError(f"Value of type {type(data).__name__} is not JSON-compatible")


def to_python(value: DynamicValue) -> Any:
    """
    DynamicValue -> plain Python (пригодно для json.dump).

    Числа без дробной части возвращаются как int.
    """
    kind = value.kind
    if kind in (ValueKind.NULL, ValueKind.UNDEFINED):
        return None
    if kind is ValueKind.BOOLEAN:
        return value.boolean_value()
    if kind is ValueKind.NUMBER:
        number = value.number_value()
        if number.is_integer():
            return int(number)
        return number
    if kind is ValueKind.STRING:
        return value.string_value()
    if kind is ValueKind.ARRAY:
        return [to_python(value.get_index(i)) for i in range(value.length())]

    result = {}
    for key in value.own_keys():
        child = value.get(key)
        if child.is_undefined():
            continue
        result[key] = to_python(child)
    return result


def loads(text: str) -> DynamicValue:
    """
    JSON текст -> DynamicValue.

    Raises:
        json.JSONDecodeError: Если текст не является валидным JSON
    """
    return from_python(json.loads(text))


def dumps(value: DynamicValue, **kwargs: Any) -> str:
    """DynamicValue -> JSON текст (kwargs передаются в json.dumps)"""
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(to_python(value), **kwargs)
