"""
Промежуточное дерево генерации: типы, поля, методы как данные.

Здесь принимаются все решения, не зависящие от синтаксиса целевого
языка; отрисовкой занимается printer.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel


class Primitive(str, Enum):
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    UUID = "uuid"
    BOOLEAN = "boolean"
    UNTYPED_OBJECT = "untyped_object"


class TypeRef(BaseModel):
    """Ссылка на тип: именованный, примитив или массив"""

    primitive: Optional[Primitive] = None

    # Для именованных: раздел компонентов и путь (вложенные типы - длиннее 1)
    component: Optional[str] = None
    path: Tuple[str, ...] = ()

    is_array: bool = False
    # Словарь с ключами-строками; тип значения в items
    is_map: bool = False
    items: Optional["TypeRef"] = None

    @classmethod
    def named(cls, component: str, *path: str) -> "TypeRef":
        return cls(component=component, path=tuple(path))

    @classmethod
    def of(cls, primitive: Primitive) -> "TypeRef":
        return cls(primitive=primitive)

    @classmethod
    def array(cls, items: Optional["TypeRef"]) -> "TypeRef":
        return cls(is_array=True, items=items)

    @classmethod
    def mapping(cls, values: "TypeRef") -> "TypeRef":
        return cls(is_map=True, items=values)

    @property
    def name(self) -> Optional[str]:
        return self.path[-1] if self.path else None

    @property
    def is_named(self) -> bool:
        return bool(self.path)

    def is_resolved(self) -> bool:
        """Массив с неизвестным типом элемента считается неразрешенным"""
        if self.is_array:
            return self.items is not None and self.items.is_resolved()
        return True

    def with_innermost(self, element: "TypeRef") -> "TypeRef":
        """Подставляет тип в самый глубокий неразрешенный элемент массива"""
        if not self.is_array:
            return element
        if self.items is None:
            return TypeRef.array(element)
        return TypeRef.array(self.items.with_innermost(element))

    def __str__(self) -> str:
        if self.is_array:
            return f"{self.items if self.items is not None else '?'}[]"
        if self.is_map:
            return f"map<string, {self.items}>"
        if self.primitive:
            return self.primitive.value
        return ".".join(self.path)


class AccessorKind(str, Enum):
    GETTER = "get"
    SETTER = "set"
    PREDICATE = "is"


class Accessor(BaseModel):
    kind: AccessorKind
    name: str


class GeneratedField(BaseModel):
    source_name: str
    identifier: str
    serialized_alias: Optional[str] = None
    type: TypeRef
    is_boolean: bool = False
    accessors: List[Accessor] = []


class GeneratedType(BaseModel):
    name: str
    namespace: str
    path: Tuple[str, ...] = ()

    fields: List[GeneratedField] = []
    nested_types: List["GeneratedType"] = []

    # Схема не объектная: тип - псевдоним другого типа
    alias_of: Optional[TypeRef] = None

    def walk(self):
        """Обход типа и всех вложенных, сначала самые глубокие"""
        for nested in self.nested_types:
            yield from nested.walk()
        yield self


class PathSegment(BaseModel):
    literal: Optional[str] = None
    argument: Optional[str] = None


class ArgumentKind(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"


class BoundArgument(BaseModel):
    kind: ArgumentKind
    identifier: str
    source_name: Optional[str] = None
    type: TypeRef
    optional: bool = False


class BoundOperation(BaseModel):
    name: str
    operation_id: Optional[str] = None
    http_method: str
    path_template: str

    path: List[PathSegment] = []
    arguments: List[BoundArgument] = []
    return_type: Optional[TypeRef] = None

    # Анонимные схемы тела/ответа, поднятые в типы группы операций
    promoted_types: List[GeneratedType] = []

    @property
    def query_argument(self) -> Optional[BoundArgument]:
        for argument in self.arguments:
            if argument.kind == ArgumentKind.QUERY:
                return argument
        return None

    @property
    def body_argument(self) -> Optional[BoundArgument]:
        for argument in self.arguments:
            if argument.kind == ArgumentKind.BODY:
                return argument
        return None


class TagGroup(BaseModel):
    tag: str
    attribute: str
    class_name: str
    module: str
    operations: List[BoundOperation] = []


class ErrorType(BaseModel):
    name: str


class ClientFacade(BaseModel):
    api_name: str
    client_name: str
    error: ErrorType

    schemas: List[GeneratedType] = []
    responses: List[GeneratedType] = []
    tags: List[TagGroup] = []

    snippets: List[str] = []


TypeRef.model_rebuild()
GeneratedType.model_rebuild()
