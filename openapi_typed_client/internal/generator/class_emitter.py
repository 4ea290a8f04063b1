import logging
from typing import List, Optional, Set, Tuple

from ..types.ir import (
    Accessor,
    AccessorKind,
    GeneratedField,
    GeneratedType,
    Primitive,
    TypeRef,
)
from ..types.spec import SchemaKind, SchemaNode
from ..types.type_resolver import TypeResolver
from ..utils.naming import IdentifierNamer

logger = logging.getLogger(__name__)


class ClassEmitter:
    """Генерация структурных типов с поднятием анонимных вложенных объектов"""

    def __init__(self, resolver: TypeResolver, namer: IdentifierNamer):
        self.resolver = resolver
        self.namer = namer

    def emit(self, namespace: str, type_name: str, schema: SchemaNode) -> GeneratedType:
        """Генерация типа компонента (или поднятой схемы) в пространстве имен"""
        return self._emit(namespace, (type_name,), schema)

    def _emit(
        self, namespace: str, path: Tuple[str, ...], schema: SchemaNode
    ) -> GeneratedType:
        generated = GeneratedType(name=path[-1], namespace=namespace, path=path)

        if schema.kind != SchemaKind.OBJECT or schema.reference is not None:
            generated.alias_of = self._alias_target(schema)
            logger.debug("%s.%s -> псевдоним %s", namespace, ".".join(path), generated.alias_of)
            return generated

        # Имена полей, вложенных типов и методов доступа живут в одном
        # пространстве класса
        taken: Set[str] = set()
        nested_schemas: List[Tuple[str, SchemaNode]] = []
        declared: List[Tuple[str, str, bool, TypeRef]] = []

        for property_name, property_schema in schema.properties.items():
            resolved = self.resolver.resolve(property_schema)
            category = self.namer.type_category(resolved)
            field_type = resolved

            if resolved is None or not resolved.is_resolved():
                anonymous = self._innermost(property_schema)
                if anonymous is not None and anonymous.kind == SchemaKind.OBJECT:
                    nested_name = self.namer.unique(
                        self.namer.class_name(self.namer.singularize(property_name)),
                        taken,
                    )
                    nested_schemas.append((nested_name, anonymous))
                    element = TypeRef.named(namespace, *path, nested_name)
                else:
                    element = TypeRef.of(Primitive.UNTYPED_OBJECT)

                field_type = (
                    resolved.with_innermost(element) if resolved is not None else element
                )

            identifier, alias_needed = self.namer.disambiguate(
                property_name,
                self.namer.sanitize(property_name),
                category,
                taken,
            )
            declared.append((property_name, identifier, alias_needed, field_type))

        # Методы доступа - после всех полей: поле 'getName' не уступает
        # свое имя методу поля 'name'
        for property_name, identifier, alias_needed, field_type in declared:
            generated.fields.append(
                self._field(property_name, identifier, alias_needed, field_type, taken)
            )

        for nested_name, nested_schema in nested_schemas:
            generated.nested_types.append(
                self._emit(namespace, path + (nested_name,), nested_schema)
            )

        logger.debug(
            "%s.%s: полей %d, вложенных типов %d",
            namespace,
            ".".join(path),
            len(generated.fields),
            len(generated.nested_types),
        )
        return generated

    def _field(
        self,
        source_name: str,
        identifier: str,
        alias_needed: bool,
        field_type: TypeRef,
        taken: Set[str],
    ) -> GeneratedField:
        is_boolean = field_type.primitive == Primitive.BOOLEAN
        suffix = self.namer.capitalize(identifier)

        kinds = [AccessorKind.GETTER, AccessorKind.SETTER]
        if is_boolean:
            kinds.append(AccessorKind.PREDICATE)
        accessors = [
            Accessor(kind=kind, name=self.namer.unique(f"{kind.value}{suffix}", taken))
            for kind in kinds
        ]

        return GeneratedField(
            source_name=source_name,
            identifier=identifier,
            serialized_alias=source_name if alias_needed else None,
            type=field_type,
            is_boolean=is_boolean,
            accessors=accessors,
        )

    def _alias_target(self, schema: SchemaNode) -> TypeRef:
        resolved = self.resolver.resolve(schema)
        if resolved is None:
            return TypeRef.of(Primitive.UNTYPED_OBJECT)
        if not resolved.is_resolved():
            # У псевдонима нет класса-владельца для вложенного типа
            return resolved.with_innermost(TypeRef.of(Primitive.UNTYPED_OBJECT))
        return resolved

    @staticmethod
    def _innermost(schema: SchemaNode) -> Optional[SchemaNode]:
        """Схема самого глубокого элемента массива (или сама схема)"""
        while schema is not None and schema.kind == SchemaKind.ARRAY:
            schema = schema.items
        return schema
