"""
Неизменяемая модель разобранной OpenAPI спецификации
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SchemaKind(str, Enum):
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    REFERENCE = "reference"


class ParameterLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SchemaNode(_Frozen):
    kind: SchemaKind
    format: Optional[str] = None
    # Порядок свойств значим: в нем же генерируются поля
    properties: Dict[str, "SchemaNode"] = {}
    items: Optional["SchemaNode"] = None
    reference: Optional[str] = None

    @classmethod
    def ref(cls, pointer: str) -> "SchemaNode":
        return cls(kind=SchemaKind.REFERENCE, reference=pointer)


class ParameterSpec(_Frozen):
    name: str
    location: ParameterLocation
    schema_node: Optional[SchemaNode] = None


class Content(_Frozen):
    """Варианты тела запроса/ответа по типу содержимого"""

    json_schema: Optional[SchemaNode] = None
    form_schema: Optional[SchemaNode] = None
    xml_schema: Optional[SchemaNode] = None

    def preferred_schema(self) -> Optional[SchemaNode]:
        """Первый присутствующий вариант в порядке JSON, form, XML"""
        for variant in (self.json_schema, self.form_schema, self.xml_schema):
            if variant is not None:
                return variant
        return None


class ResponseSpec(_Frozen):
    status: str
    content: Optional[Content] = None


class Operation(_Frozen):
    id: Optional[str] = None
    http_method: str
    path_template: str
    parameters: Tuple[ParameterSpec, ...] = ()
    request_body: Optional[Content] = None
    responses: Tuple[ResponseSpec, ...] = ()
    tags: Tuple[str, ...] = ()

    def success_response(self) -> Optional[ResponseSpec]:
        """Первый ответ с кодом 2xx"""
        for response in self.responses:
            if response.status.startswith("2"):
                return response
        return None


class PathItem(_Frozen):
    template: str
    parameters: Tuple[ParameterSpec, ...] = ()
    operations: Tuple[Operation, ...] = ()


class ApiDescription(_Frozen):
    title: str = ""
    version: Optional[str] = None
    tags: Tuple[str, ...] = ()
    paths: Tuple[PathItem, ...] = ()
    schemas: Dict[str, SchemaNode] = {}
    responses: Dict[str, Content] = {}


SchemaNode.model_rebuild()
