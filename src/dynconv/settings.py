"""
EngineSettings - настройки движка конверсии

Immutable Pydantic модель. Передаётся в ConversionEngine при создании.
"""

from pydantic import BaseModel, Field


class EngineSettings(BaseModel):
    """
    Настройки ConversionEngine.

    max_depth ограничивает глубину рекурсии: при превышении конверсия
    завершается ConversionError, а не исчерпанием стека интерпретатора.
    """

    max_depth: int = Field(
        100, gt=0, description="Максимальная глубина вложенности конвертируемых значений"
    )
    allow_empty_shared: bool = Field(
        False,
        description=(
            "null/undefined загружается в пустой Shared handle, "
            "пустой handle сохраняется как null"
        ),
    )

    model_config = {"frozen": True}
