from typing import Dict, Optional, Tuple

from ...exceptions import ResolutionError
from .ir import Primitive, TypeRef
from .spec import SchemaKind, SchemaNode

# Форма указателя: #/components/<kind>/<name>
_POINTER_SEGMENTS = 4


class TypeResolver:
    """Отображение схемы в тип или None, если тип нужно синтезировать"""

    def __init__(self, names: Optional[Dict[Tuple[str, str], str]] = None):
        # (раздел, имя компонента) -> имя сгенерированного класса
        self.names: Dict[Tuple[str, str], str] = dict(names or {})

    def register(self, component: str, name: str, class_name: str):
        self.names[(component, name)] = class_name

    def resolve(self, schema: Optional[SchemaNode]) -> Optional[TypeRef]:
        if schema is None:
            return None

        if schema.reference is not None:
            component, name = self.parse_reference(schema.reference)
            return TypeRef.named(component, self.names.get((component, name), name))

        if schema.kind == SchemaKind.INTEGER:
            return TypeRef.of(
                Primitive.INT64 if schema.format == "int64" else Primitive.INT32
            )

        if schema.kind == SchemaKind.NUMBER:
            return TypeRef.of(
                Primitive.FLOAT if schema.format == "float" else Primitive.DOUBLE
            )

        if schema.kind == SchemaKind.STRING:
            return TypeRef.of(
                Primitive.UUID if schema.format == "uuid" else Primitive.STRING
            )

        if schema.kind == SchemaKind.BOOLEAN:
            return TypeRef.of(Primitive.BOOLEAN)

        if schema.kind == SchemaKind.ARRAY:
            # Неизвестная форма элемента не блокирует генерацию
            if schema.items is None:
                return TypeRef.array(TypeRef.of(Primitive.UNTYPED_OBJECT))
            return TypeRef.array(self.resolve(schema.items))

        # Анонимный объект: вызывающий синтезирует имя и рекурсивно генерирует тип
        return None

    @staticmethod
    def parse_reference(pointer: str):
        """Разбор '#/components/<kind>/<name>' в (kind, name)"""
        segments = pointer.split("/")
        if (
            len(segments) != _POINTER_SEGMENTS
            or segments[0] != "#"
            or segments[1] != "components"
            or not segments[2]
            or not segments[3]
        ):
            raise ResolutionError(pointer)

        return segments[2], segments[3]
