"""
Тесты очистки имен и разрешения конфликтов
"""

import pytest

from openapi_typed_client.internal.types.ir import Primitive, TypeRef
from openapi_typed_client.internal.utils import (
    ARGUMENT_RESERVED_WORDS,
    RESERVED_WORDS,
    IdentifierNamer,
)


class TestSanitize:
    """Сворачивание разделителей в camelCase"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("name", "name"),
            ("created_at", "createdAt"),
            ("x-rate-limit", "xRateLimit"),
            ("api.version", "apiVersion"),
            ("a_1", "a_1"),
            ("trailing_", "trailing_"),
            ("already_Upper", "alreadyUpper"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert IdentifierNamer.sanitize(raw) == expected


class TestDisambiguate:
    """Зарезервированные слова и уникальность"""

    def test_reserved_word_gets_type_suffix(self):
        taken = set()

        final, alias_needed = IdentifierNamer.disambiguate(
            "class", "class", "Boolean", taken
        )

        assert final == "classBoolean"
        assert alias_needed is True
        assert taken == {"classBoolean"}

    def test_plain_name_needs_no_alias(self):
        final, alias_needed = IdentifierNamer.disambiguate("name", "name", "String", set())

        assert final == "name"
        assert alias_needed is False

    def test_renamed_identifier_keeps_wire_alias(self):
        final, alias_needed = IdentifierNamer.disambiguate(
            "created_at", "createdAt", "String", set()
        )

        assert final == "createdAt"
        assert alias_needed is True

    def test_unique_within_owner(self):
        """created_at и createdAt не сливаются в одно поле"""
        taken = set()

        first, _ = IdentifierNamer.disambiguate("createdAt", "createdAt", "String", taken)
        second, alias_needed = IdentifierNamer.disambiguate(
            "created_at", "createdAt", "String", taken
        )

        assert first == "createdAt"
        assert second == "createdAt2"
        assert alias_needed is True

    def test_argument_reserved_words(self):
        final, _ = IdentifierNamer.disambiguate(
            "self", "self", "Int", set(), ARGUMENT_RESERVED_WORDS
        )

        assert final == "selfInt"
        assert "self" not in RESERVED_WORDS

    @pytest.mark.parametrize(
        "type_ref, expected",
        [
            (TypeRef.of(Primitive.INT32), "Int"),
            (TypeRef.of(Primitive.INT64), "Long"),
            (TypeRef.of(Primitive.FLOAT), "Float"),
            (TypeRef.of(Primitive.DOUBLE), "Double"),
            (TypeRef.of(Primitive.STRING), "String"),
            (TypeRef.of(Primitive.UUID), "Uuid"),
            (TypeRef.of(Primitive.BOOLEAN), "Boolean"),
            (TypeRef.of(Primitive.UNTYPED_OBJECT), "Object"),
            (TypeRef.array(TypeRef.of(Primitive.INT32)), "Array"),
            (TypeRef.array(None), "Object"),
            (TypeRef.named("schemas", "Pet"), "Object"),
            (None, "Object"),
        ],
    )
    def test_type_category(self, type_ref, expected):
        assert IdentifierNamer.type_category(type_ref) == expected


class TestTypeNames:
    """Имена типов, модулей и атрибутов"""

    @pytest.mark.parametrize(
        "plural, expected",
        [
            ("categories", "category"),
            ("addresses", "address"),
            ("cars", "car"),
            ("data", "data"),
            # Эвристика: неправильные формы не обрабатываются
            ("status", "statu"),
        ],
    )
    def test_singularize(self, plural, expected):
        assert IdentifierNamer.singularize(plural) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Swagger Petstore", "SwaggerPetstore"),
            ("swagger-petstore 2.0", "SwaggerPetstore20"),
            ("", "Api"),
            ("!!!", "Api"),
            ("3scale", "Api3scale"),
        ],
    )
    def test_type_name(self, raw, expected):
        assert IdentifierNamer.type_name(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Pet", "Pet"),
            ("api.v1.User", "ApiV1User"),
            ("Pet-Response", "PetResponse"),
            ("list", "ListModel"),
            ("none", "NoneModel"),
            ("2fa", "Model2fa"),
        ],
    )
    def test_class_name(self, raw, expected):
        """Имя класса компонента - корректный идентификатор Python"""
        assert IdentifierNamer.class_name(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("HTTPValidationError", "http_validation_error"),
            ("Pet", "pet"),
            ("Pet-Store", "pet_store"),
            ("Class", "class_"),
            ("2fa", "m2fa"),
        ],
    )
    def test_module_name(self, raw, expected):
        assert IdentifierNamer.module_name(raw) == expected

    def test_attribute_name(self):
        assert IdentifierNamer.attribute_name("pet-store") == "petStore"
        assert IdentifierNamer.attribute_name("") == "default"

    def test_unique(self):
        taken = {"Item"}

        assert IdentifierNamer.unique("Item", taken) == "Item2"
        assert IdentifierNamer.unique("Item", taken) == "Item3"
        assert IdentifierNamer.unique("Other", taken) == "Other"
