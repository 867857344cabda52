"""
dynconv - двусторонняя конверсия динамических значений и native типов

Тип один раз объявляет, как он отображается в модель динамических
значений (через load/save hooks); вложенные, агрегатные и контейнерные
типы комбинируются автоматически.

    from dynconv import Int32, convert_to_native
    result = convert_to_native(value, list[Int32])
    if result.ok:
        numbers = result.value
"""

import logging

from dynconv.context import LoadContext, SaveContext
from dynconv.converters.aggregate import Convertible
from dynconv.converters.base import ConversionCall, Converter
from dynconv.engine import (
    ConversionEngine,
    convert_to_dynamic,
    convert_to_native,
    default_engine,
)
from dynconv.errors import ConversionError, ConversionResult
from dynconv.settings import EngineSettings
from dynconv.types import (
    MAX_SAFE_INTEGER,
    Float32,
    Float64,
    Int16,
    Int32,
    Int64,
    Shared,
    UInt16,
    UInt32,
    UInt64,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Entry points
    "convert_to_native",
    "convert_to_dynamic",
    "ConversionEngine",
    "default_engine",
    "EngineSettings",
    # Errors
    "ConversionError",
    "ConversionResult",
    # Contexts / extension
    "LoadContext",
    "SaveContext",
    "Convertible",
    "Converter",
    "ConversionCall",
    # Types
    "Shared",
    "Int16",
    "UInt16",
    "Int32",
    "UInt32",
    "Int64",
    "UInt64",
    "Float32",
    "Float64",
    "MAX_SAFE_INTEGER",
]
