"""
Converters - конвертеры для встроенных и пользовательских типов.

Модули импортируются напрямую (dynconv.converters.primitives и т.д.).
dynconv.converters.aggregate зависит от dynconv.context, поэтому пакет
ничего не реэкспортирует.
"""
