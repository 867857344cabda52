"""
Host - модель динамических значений и in-memory host-движок.

Ядро конверсии считает этот слой внешним коллаборатором.
"""

from dynconv.host.memory import Host, MemoryHost
from dynconv.host.values import (
    NULL,
    UNDEFINED,
    DynamicValue,
    HostError,
    JsArray,
    JsBoolean,
    JsNull,
    JsNumber,
    JsObject,
    JsString,
    JsUndefined,
    ValueKind,
)

__all__ = [
    # Host
    "Host",
    "MemoryHost",
    "HostError",
    # Values
    "ValueKind",
    "DynamicValue",
    "JsUndefined",
    "JsNull",
    "JsBoolean",
    "JsNumber",
    "JsString",
    "JsArray",
    "JsObject",
    "UNDEFINED",
    "NULL",
]
