"""
Тесты генерации структурных типов
"""

from openapi_typed_client.internal.generator.class_emitter import ClassEmitter
from openapi_typed_client.internal.types.ir import AccessorKind, Primitive, TypeRef
from openapi_typed_client.internal.types.spec import SchemaKind, SchemaNode
from openapi_typed_client.internal.types.type_resolver import TypeResolver
from openapi_typed_client.internal.utils import IdentifierNamer


def obj(**properties) -> SchemaNode:
    return SchemaNode(kind=SchemaKind.OBJECT, properties=properties)


def array(items=None) -> SchemaNode:
    return SchemaNode(kind=SchemaKind.ARRAY, items=items)


STRING = SchemaNode(kind=SchemaKind.STRING)
BOOLEAN = SchemaNode(kind=SchemaKind.BOOLEAN)
INTEGER = SchemaNode(kind=SchemaKind.INTEGER, format="int64")


def emit(schema: SchemaNode, name: str = "Pet", namespace: str = "schemas"):
    return ClassEmitter(TypeResolver(), IdentifierNamer()).emit(namespace, name, schema)


class TestFields:
    """Поля и методы доступа"""

    def test_field_order_follows_declaration(self):
        generated = emit(obj(zeta=STRING, alpha=INTEGER, mid=BOOLEAN))

        assert [f.identifier for f in generated.fields] == ["zeta", "alpha", "mid"]

    def test_field_order_is_stable_for_any_order(self):
        names = ["b", "a", "d", "c"]
        for shift in range(len(names)):
            order = names[shift:] + names[:shift]
            generated = emit(obj(**{name: STRING for name in order}))

            assert [f.source_name for f in generated.fields] == order

    def test_reserved_boolean_field(self):
        """class -> classBoolean с предикатом и alias"""
        generated = emit(obj(**{"class": BOOLEAN}))

        field = generated.fields[0]
        assert field.identifier == "classBoolean"
        assert field.serialized_alias == "class"
        assert field.is_boolean
        assert field.type == TypeRef.of(Primitive.BOOLEAN)
        assert [(a.kind, a.name) for a in field.accessors] == [
            (AccessorKind.GETTER, "getClassBoolean"),
            (AccessorKind.SETTER, "setClassBoolean"),
            (AccessorKind.PREDICATE, "isClassBoolean"),
        ]

    def test_non_boolean_has_no_predicate(self):
        field = emit(obj(name=STRING)).fields[0]

        assert field.serialized_alias is None
        assert not field.is_boolean
        assert [a.name for a in field.accessors] == ["getName", "setName"]

    def test_renamed_field_keeps_wire_name(self):
        field = emit(obj(created_at=STRING)).fields[0]

        assert field.identifier == "createdAt"
        assert field.serialized_alias == "created_at"

    def test_reserved_array_and_object_suffixes(self):
        generated = emit(
            obj(**{"from": array(STRING), "import": array(obj(x=STRING))})
        )

        assert [f.identifier for f in generated.fields] == ["fromArray", "importObject"]


class TestPromotion:
    """Поднятие анонимных объектов во вложенные типы"""

    def test_plural_properties_promote_singular_types(self):
        item = obj(name=STRING)
        generated = emit(
            obj(categories=array(item), addresses=array(item), cars=array(item))
        )

        assert [t.name for t in generated.nested_types] == ["Category", "Address", "Car"]
        assert generated.fields[0].type == TypeRef.array(
            TypeRef.named("schemas", "Pet", "Category")
        )

    def test_nested_object(self):
        generated = emit(obj(owner=obj(name=STRING)))

        nested = generated.nested_types[0]
        assert nested.name == "Owner"
        assert nested.path == ("Pet", "Owner")
        assert [f.identifier for f in nested.fields] == ["name"]
        assert generated.fields[0].type == TypeRef.named("schemas", "Pet", "Owner")

    def test_deep_nesting(self):
        generated = emit(obj(lines=array(obj(detail=obj(sku=STRING)))), name="Order")

        line = generated.nested_types[0]
        detail = line.nested_types[0]
        assert detail.path == ("Order", "Line", "Detail")
        assert [t.name for t in generated.walk()] == ["Detail", "Line", "Order"]

    def test_nested_names_are_unique(self):
        generated = emit(obj(item=obj(a=STRING), items=array(obj(b=STRING))))

        assert [t.name for t in generated.nested_types] == ["Item", "Item2"]
        assert generated.fields[1].type == TypeRef.array(
            TypeRef.named("schemas", "Pet", "Item2")
        )

    def test_reference_creates_no_nested_type(self):
        generated = emit(obj(foo=SchemaNode.ref("#/components/schemas/Foo")))

        assert generated.nested_types == []
        assert generated.fields[0].type == TypeRef.named("schemas", "Foo")

    def test_array_of_arrays_of_objects(self):
        generated = emit(obj(grid=array(array(obj(v=INTEGER)))))

        assert generated.fields[0].type == TypeRef.array(
            TypeRef.array(TypeRef.named("schemas", "Pet", "Grid"))
        )


class TestAliases:
    """Схемы компонентов, которые не являются объектами"""

    def test_reference_alias(self):
        generated = emit(SchemaNode.ref("#/components/schemas/Foo"), name="Bar")

        assert generated.alias_of == TypeRef.named("schemas", "Foo")
        assert generated.fields == []
        assert generated.nested_types == []

    def test_primitive_array_alias(self):
        generated = emit(array(INTEGER), name="Ids")

        assert generated.alias_of == TypeRef.array(TypeRef.of(Primitive.INT64))

    def test_anonymous_array_alias_falls_back_to_untyped(self):
        generated = emit(array(obj(x=STRING)), name="Things")

        assert generated.alias_of == TypeRef.array(TypeRef.of(Primitive.UNTYPED_OBJECT))


class TestNameClashes:
    """Имена, которые нельзя брать из wire-имени как есть"""

    def test_nested_name_from_hyphenated_property(self):
        generated = emit(obj(**{"line-items": array(obj(sku=STRING))}), name="Order")

        assert [t.name for t in generated.nested_types] == ["LineItem"]
        assert generated.fields[0].identifier == "lineItems"
        assert generated.fields[0].type == TypeRef.array(
            TypeRef.named("schemas", "Order", "LineItem")
        )

    def test_accessors_unique_for_case_variants(self):
        """foo и Foo: у каждого поля своя пара методов доступа"""
        generated = emit(obj(foo=STRING, Foo=INTEGER), name="Pair")

        names = [[a.name for a in f.accessors] for f in generated.fields]
        assert names == [["getFoo", "setFoo"], ["getFoo2", "setFoo2"]]

    def test_field_named_like_accessor(self):
        generated = emit(obj(getName=STRING, name=STRING))

        assert [f.identifier for f in generated.fields] == ["getName", "name"]
        assert [a.name for a in generated.fields[1].accessors] == [
            "getName2",
            "setName",
        ]

    def test_accessor_names_differ_from_everything_in_class(self):
        generated = emit(
            obj(item=obj(a=STRING), getItem=STRING, isOk=BOOLEAN, ok=BOOLEAN)
        )

        members = [t.name for t in generated.nested_types] + [
            f.identifier for f in generated.fields
        ]
        members += [a.name for f in generated.fields for a in f.accessors]
        assert len(members) == len(set(members))
