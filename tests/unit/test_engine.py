"""
Тесты для ConversionEngine и top-level entry points

Проверяет:
- Разрешение конвертеров по типу (кэш, TypeError для неподдерживаемых)
- register() для собственных конвертеров
- Ограничение глубины рекурсии
- Сведение ошибок host-движка к ConversionError
- Баланс host scopes после успешных и неуспешных вызовов
- EngineSettings (Pydantic)
"""

from typing import Annotated

import pytest
from pydantic import ValidationError

from dynconv import (
    ConversionEngine,
    ConversionResult,
    Converter,
    Convertible,
    EngineSettings,
    Int32,
    convert_to_dynamic,
    convert_to_native,
    default_engine,
)
from dynconv.converters.aggregate import AggregateConverter
from dynconv.converters.containers import SequenceConverter
from dynconv.converters.primitives import IntegerConverter
from dynconv.host import HostError, JsArray, JsNumber, JsObject, JsString, MemoryHost


HexInt = Annotated[int, "hex"]


class HexIntConverter(Converter[int]):
    """Целое, хранимое как hex-строка"""

    native_type = HexInt

    def from_dynamic(self, value, call):
        if not value.is_string():
            return ConversionResult.failure("expected hex string")
        try:
            return ConversionResult.success(int(value.string_value(), 16))
        except ValueError:
            return ConversionResult.failure("malformed hex string")

    def to_dynamic(self, native, call):
        return ConversionResult.success(call.host.new_string(format(native, "x")))


class Opaque:
    """Нет load/save"""


class HalfHooked:
    @staticmethod
    def load(context, target):
        return None


class Counter:
    def __init__(self):
        self.count = 0

    @staticmethod
    def load(context, target):
        target.count = context.get("count", int).unwrap()

    @staticmethod
    def save(context, source):
        context.set("count", source.count).unwrap()


class ThrowingArray(JsArray):
    def get_index(self, index):
        raise HostError("array storage detached")


def nested(depth: int):
    """[[[...1...]]] с depth уровнями массивов"""
    value = JsNumber(1)
    for _ in range(depth):
        value = JsArray([value])
    return value


@pytest.fixture
def host():
    return MemoryHost()


@pytest.fixture
def engine(host):
    return ConversionEngine(host=host)


# =============================================================================
# RESOLUTION
# =============================================================================


class TestConverterResolution:
    """Выбор конвертера по native типу"""

    def test_resolution_is_cached(self, engine) -> None:
        """Разрешённый конвертер кэшируется"""
        first = engine.converter_for(list[Int32])

        assert engine.converter_for(list[Int32]) is first
        assert isinstance(first, SequenceConverter)
        assert isinstance(first.element_converter, IntegerConverter)

    def test_hooked_class_gets_aggregate_converter(self, engine) -> None:
        """Класс с hooks получает AggregateConverter"""
        assert isinstance(engine.converter_for(Counter), AggregateConverter)
        assert isinstance(Counter(), Convertible)

    @pytest.mark.parametrize("native_type", [Opaque, HalfHooked, object, bytes, complex])
    def test_unsupported_type_raises_before_conversion(self, engine, native_type) -> None:
        """Неподдерживаемый тип - TypeError до конверсии"""
        with pytest.raises(TypeError, match="No converter"):
            engine.to_native(JsObject(), native_type)

    def test_unsupported_type_on_save(self, engine) -> None:
        """Неподдерживаемый тип при сохранении - TypeError"""
        with pytest.raises(TypeError):
            engine.to_dynamic(Opaque())

    def test_unknown_annotation_falls_back_to_base(self, engine) -> None:
        """Неизвестная аннотация не влияет на конверсию"""
        Tagged = Annotated[str, "label"]

        assert engine.to_native(JsString("x"), Tagged).unwrap() == "x"

    def test_unhashable_annotation_metadata(self, engine) -> None:
        """Нехешируемые метаданные Annotated не мешают разрешению"""
        Documented = Annotated[int, {"doc": "x"}]

        assert engine.to_native(JsNumber(1), Documented).unwrap() == 1
        assert engine.to_dynamic([5], list[Documented]).unwrap() == JsArray([JsNumber(5)])
        assert engine.to_native(JsArray([JsNumber(2)]), list[Documented]).unwrap() == [2]

    def test_type_error_from_hook_propagates(self, engine, host) -> None:
        """TypeError из hook не перехватывается"""
        class Broken:
            @staticmethod
            def load(context, target):
                context.get("x", object, None)

            @staticmethod
            def save(context, source):
                return None

        with pytest.raises(TypeError):
            engine.to_native(JsObject({"x": JsNumber(1)}), Broken)
        assert host.open_scopes == 0


class TestRegister:
    """Собственные конвертеры через register()"""

    def test_registered_converter_is_used(self, engine) -> None:
        """Зарегистрированный конвертер используется"""
        engine.register(HexInt, HexIntConverter())

        assert engine.to_native(JsString("ff"), HexInt).unwrap() == 255
        assert engine.to_dynamic(255, HexInt).unwrap() == JsString("ff")

    def test_registered_converter_composes_with_containers(self, engine) -> None:
        """Зарегистрированный конвертер работает внутри контейнеров"""
        engine.register(HexInt, HexIntConverter())
        value = JsObject({"a": JsArray([JsString("10"), JsString("1f")])})

        assert engine.to_native(value, dict[str, list[HexInt]]).unwrap() == {"a": [16, 31]}

    def test_register_overrides_builtin_and_resets_cache(self, engine) -> None:
        """register перекрывает встроенный конвертер и сбрасывает кэш"""
        engine.converter_for(list[str])

        engine.register(str, IntegerConverter(str, Int32.__metadata__[0]))

        assert engine.to_native(JsArray([JsNumber(7)]), list[str]).unwrap() == [7]

    def test_registration_is_per_engine(self, engine) -> None:
        """Регистрация не влияет на другие движки"""
        engine.register(HexInt, HexIntConverter())

        assert convert_to_native(JsString("ff"), HexInt).ok is False


# =============================================================================
# DEPTH / HOST ERRORS / SCOPES
# =============================================================================


class TestDepthLimit:
    """max_depth ограничивает рекурсию"""

    def test_within_limit(self) -> None:
        """Вложенность в пределах лимита конвертируется"""
        engine = ConversionEngine(settings=EngineSettings(max_depth=4))

        assert engine.to_native(nested(3), list[list[list[int]]]).unwrap() == [[[1]]]

    def test_exceeding_limit_fails(self) -> None:
        """Превышение лимита вложенности - ошибка"""
        engine = ConversionEngine(settings=EngineSettings(max_depth=3))

        result = engine.to_native(nested(3), list[list[list[int]]])

        assert not result.ok
        assert "maximum nesting depth 3 exceeded" in result.error.reason

    def test_limit_applies_to_save(self) -> None:
        """Лимит вложенности действует и при сохранении"""
        engine = ConversionEngine(settings=EngineSettings(max_depth=2))

        assert not engine.to_dynamic([[1]], list[list[int]]).ok


class TestHostErrorCoalescing:
    """HostError на top-level -> ConversionError без причины"""

    def test_host_error_on_load(self, engine) -> None:
        """Ошибка host-движка при загрузке - ошибка без причины"""
        result = engine.to_native(ThrowingArray([JsNumber(1)]), list[int])

        assert not result.ok
        assert result.error.reason is None
        assert str(result.error) == "Conversion failed"

    def test_host_error_in_mapping(self, engine) -> None:
        """Ошибка host-движка внутри dict сводится к ConversionError"""
        class ThrowingObject(JsObject):
            def get(self, key):
                raise HostError("getter threw")

        result = engine.to_native(ThrowingObject({"a": JsNumber(1)}), dict[str, int])

        assert not result.ok
        assert result.error.reason is None

    def test_scopes_released(self, engine, host) -> None:
        """Scopes закрываются после вызова"""
        engine.to_native(ThrowingArray([JsNumber(1)]), list[int])
        engine.to_native(JsString("x"), Counter)
        engine.to_native(JsObject({"count": JsNumber(2)}), Counter)
        engine.to_dynamic([1, "x"], list[int])

        assert host.open_scopes == 0


# =============================================================================
# ENTRY POINTS / SETTINGS
# =============================================================================


class TestEntryPoints:
    """convert_to_native / convert_to_dynamic используют глобальный движок"""

    def test_default_engine_is_shared(self) -> None:
        """Глобальный движок один на процесс"""
        assert default_engine() is default_engine()
        assert isinstance(default_engine().host, MemoryHost)

    def test_round_trip_through_default_engine(self) -> None:
        """Round-trip через глобальный движок"""
        counter = Counter()
        counter.count = 3

        dynamic = convert_to_dynamic(counter).unwrap()

        assert dynamic == JsObject({"count": JsNumber(3)})
        assert convert_to_native(dynamic, Counter).unwrap().count == 3

    def test_explicit_engine(self, engine, host) -> None:
        """Явно переданный движок используется"""
        result = convert_to_native(JsNumber(1), int, engine=engine)

        assert result.unwrap() == 1
        assert host.open_scopes == 0


class TestEngineSettings:
    """Pydantic настройки движка"""

    def test_defaults(self) -> None:
        """Значения настроек по умолчанию"""
        settings = EngineSettings()

        assert settings.max_depth == 100
        assert settings.allow_empty_shared is False

    def test_max_depth_must_be_positive(self) -> None:
        """max_depth должен быть положительным"""
        with pytest.raises(ValidationError):
            EngineSettings(max_depth=0)

    def test_frozen(self) -> None:
        """Настройки неизменяемы"""
        settings = EngineSettings()

        with pytest.raises(ValidationError):
            settings.max_depth = 5
