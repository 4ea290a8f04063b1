"""Утилиты для работы с именами полей, типов и параметров"""

import keyword
import re
from typing import Optional, Set, Tuple

from ..types.ir import Primitive, TypeRef

SEPARATORS = frozenset("_-.")

# Имена, которые нельзя использовать как поле pydantic модели
RESERVED_WORDS = frozenset(keyword.kwlist) | frozenset(
    {
        "print",
        "exec",
        "model_config",
        "model_fields",
        "schema",
        "json",
        "dict",
        "copy",
        "construct",
        "validate",
    }
)

# Для аргументов методов дополнительно занят self
ARGUMENT_RESERVED_WORDS = RESERVED_WORDS | frozenset({"self"})

# Имена из заголовков модулей модели; класс с таким именем их перекроет
CLASS_RESERVED_WORDS = frozenset(keyword.kwlist) | frozenset(
    {
        "Any",
        "Dict",
        "List",
        "Optional",
        "UUID",
        "BaseModel",
        "ConfigDict",
        "Field",
        "TypeAdapter",
    }
)

_PRIMITIVE_SUFFIXES = {
    Primitive.INT32: "Int",
    Primitive.INT64: "Long",
    Primitive.FLOAT: "Float",
    Primitive.DOUBLE: "Double",
    Primitive.STRING: "String",
    Primitive.UUID: "Uuid",
    Primitive.BOOLEAN: "Boolean",
}

FALLBACK_SUFFIX = "Object"
ARRAY_SUFFIX = "Array"


class IdentifierNamer:
    """Очистка имен, разрешение конфликтов с зарезервированными словами"""

    @staticmethod
    def sanitize(raw: str) -> str:
        """
        Сворачивает разделители в camelCase.

        Разделитель (_, -, .) перед буквой удаляется, буква поднимается
        в верхний регистр. Остальные символы не меняются.

        Examples:
            >>> IdentifierNamer.sanitize("created_at")
            'createdAt'
            >>> IdentifierNamer.sanitize("x-rate.limit")
            'xRateLimit'
        """
        result = []
        i = 0
        while i < len(raw):
            char = raw[i]
            if char in SEPARATORS and i + 1 < len(raw) and raw[i + 1].isalpha():
                result.append(raw[i + 1].upper())
                i += 2
                continue
            result.append(char)
            i += 1
        return "".join(result)

    @staticmethod
    def type_category(type_ref: Optional[TypeRef]) -> str:
        """Суффикс по категории типа; все, что вне списка, - Object"""
        if type_ref is None:
            return FALLBACK_SUFFIX
        if type_ref.is_array:
            return ARRAY_SUFFIX if type_ref.is_resolved() else FALLBACK_SUFFIX
        return _PRIMITIVE_SUFFIXES.get(type_ref.primitive, FALLBACK_SUFFIX)

    @staticmethod
    def disambiguate(
        wire_name: str,
        identifier: str,
        category: str,
        taken: Set[str],
        reserved: frozenset = RESERVED_WORDS,
    ) -> Tuple[str, bool]:
        """
        Итоговый идентификатор и признак необходимости alias.

        Зарезервированное слово получает суффикс категории типа,
        затем имя делается уникальным в пределах taken.
        """
        final = identifier
        if final in reserved:
            final = f"{final}{category}"

        if final in taken:
            counter = 2
            while f"{final}{counter}" in taken:
                counter += 1
            final = f"{final}{counter}"

        taken.add(final)
        return final, final != wire_name

    @staticmethod
    def singularize(plural: str) -> str:
        """
        Эвристика для имени поднятого типа из имени поля во множественном
        числе. Неправильные формы не обрабатываются ("statuses" -> "status",
        но "status" -> "statu").
        """
        if plural.endswith("ies"):
            return plural[:-3] + "y"
        if plural.endswith("es"):
            return plural[:-2]
        if plural.endswith("s"):
            return plural[:-1]
        return plural

    @staticmethod
    def capitalize(source: str) -> str:
        return source[:1].upper() + source[1:]

    @staticmethod
    def unique(name: str, taken: Set[str]) -> str:
        """Уникальное имя с числовым суффиксом"""
        final = name
        counter = 2
        while final in taken:
            final = f"{name}{counter}"
            counter += 1
        taken.add(final)
        return final

    @classmethod
    def type_name(cls, raw: str, fallback: str = "Api") -> str:
        """PascalCase имя только из букв и цифр"""
        name = re.sub(r"[^A-Za-z0-9]", "", cls.capitalize(cls.sanitize(raw)))
        if not name:
            return fallback
        if name[0].isdigit():
            name = f"{fallback}{name}"
        return name

    @classmethod
    def class_name(cls, raw: str, fallback: str = "Model") -> str:
        """
        Имя генерируемого класса: type_name, которое не совпадает
        с ключевым словом и не перекрывает импорты модуля модели.

        Examples:
            >>> IdentifierNamer.class_name("api.v1.User")
            'ApiV1User'
            >>> IdentifierNamer.class_name("list")
            'ListModel'
        """
        name = cls.type_name(raw, fallback=fallback)
        if name in CLASS_RESERVED_WORDS:
            name = f"{name}{fallback}"
        return name

    @classmethod
    def attribute_name(cls, raw: str, fallback: str = "default") -> str:
        """camelCase имя атрибута только из допустимых символов"""
        name = re.sub(r"[^A-Za-z0-9_]", "", cls.sanitize(raw))
        if not name:
            return fallback
        if name[0].isdigit():
            name = f"{fallback}{name}"
        return name

    @classmethod
    def module_name(cls, name: str) -> str:
        """Имя модуля в snake_case, не совпадающее с ключевым словом"""
        module = cls.snake_case(re.sub(r"[^0-9A-Za-z_.\-\s]", "_", name)) or "module"
        if module[0].isdigit():
            module = f"m{module}"
        if keyword.iskeyword(module):
            module = f"{module}_"
        return module

    @staticmethod
    def snake_case(name: str) -> str:
        # Сначала заменяем дефисы и точки на подчеркивания
        name = re.sub(r"[-.\s]", "_", name)

        # HTTPValidationError -> http_validation_error
        s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
        s2 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1)
        s3 = re.sub("([A-Z]+)([A-Z][a-z])", r"\1_\2", s2)
        s4 = re.sub("_+", "_", s3)
        return s4.strip("_").lower()
