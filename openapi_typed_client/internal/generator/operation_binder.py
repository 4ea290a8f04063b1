import logging
import re
from typing import List, Set

from ..types.ir import (
    ArgumentKind,
    BoundArgument,
    BoundOperation,
    PathSegment,
    Primitive,
    TypeRef,
)
from ..types.spec import (
    Operation,
    ParameterLocation,
    ParameterSpec,
    PathItem,
    SchemaKind,
    SchemaNode,
)
from ..types.type_resolver import TypeResolver
from ..utils.naming import ARGUMENT_RESERVED_WORDS, IdentifierNamer
from .class_emitter import ClassEmitter

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"(\{[^{}]*\})")

QUERY_ARGUMENT = "query_params"
BODY_ARGUMENT = "body"

# Типы поднятых схем операций живут в модуле группы
PROMOTED_NAMESPACE = "tags"


class OperationBinder:
    """Привязка одной операции к описанию вызываемого метода"""

    def __init__(
        self, resolver: TypeResolver, namer: IdentifierNamer, emitter: ClassEmitter
    ):
        self.resolver = resolver
        self.namer = namer
        self.emitter = emitter

    def bind(
        self,
        path_item: PathItem,
        operation: Operation,
        method_names: Set[str],
        type_names: Set[str],
    ) -> BoundOperation:
        """
        Привязка операции в пределах одной группы (тега).

        method_names и type_names - уже занятые в группе имена методов
        и поднятых типов.
        """
        # Параметры пути и операции склеиваются без дедупликации
        parameters: List[ParameterSpec] = list(path_item.parameters) + list(
            operation.parameters
        )

        name = self._method_name(operation, method_names)
        bound = BoundOperation(
            name=name,
            operation_id=operation.id,
            http_method=operation.http_method.lower(),
            path_template=operation.path_template,
        )

        taken: Set[str] = {QUERY_ARGUMENT, BODY_ARGUMENT}
        segments = [
            PathSegment(literal=part)
            for part in _PLACEHOLDER.split(operation.path_template)
            if part
        ]
        substituted = [False] * len(segments)

        for parameter in parameters:
            if parameter.location != ParameterLocation.PATH:
                continue

            resolved = self.resolver.resolve(parameter.schema_node)
            if resolved is None or not resolved.is_resolved():
                resolved = TypeRef.of(Primitive.STRING)

            identifier, _ = self.namer.disambiguate(
                parameter.name,
                self.namer.sanitize(parameter.name),
                self.namer.type_category(resolved),
                taken,
                ARGUMENT_RESERVED_WORDS,
            )
            bound.arguments.append(
                BoundArgument(
                    kind=ArgumentKind.PATH,
                    identifier=identifier,
                    source_name=parameter.name,
                    type=resolved,
                )
            )

            token = "{" + parameter.name + "}"
            for index, segment in enumerate(segments):
                if not substituted[index] and segment.literal == token:
                    segments[index] = PathSegment(argument=identifier)
                    substituted[index] = True

        bound.path = segments

        # Все query параметры сворачиваются в один словарь
        if any(p.location == ParameterLocation.QUERY for p in parameters):
            bound.arguments.append(
                BoundArgument(
                    kind=ArgumentKind.QUERY,
                    identifier=QUERY_ARGUMENT,
                    type=TypeRef.mapping(TypeRef.of(Primitive.STRING)),
                    optional=True,
                )
            )

        body_schema = (
            operation.request_body.preferred_schema() if operation.request_body else None
        )
        if body_schema is not None:
            body_type = self._schema_type(
                bound, body_schema, f"{self.namer.capitalize(name)}Body", type_names
            )
            bound.arguments.append(
                BoundArgument(kind=ArgumentKind.BODY, identifier=BODY_ARGUMENT, type=body_type)
            )

        success = operation.success_response()
        response_schema = (
            success.content.preferred_schema()
            if success is not None and success.content is not None
            else None
        )
        if response_schema is not None:
            bound.return_type = self._schema_type(
                bound,
                response_schema,
                f"{self.namer.capitalize(name)}Response",
                type_names,
            )

        logger.debug(
            "%s %s -> %s(%s)",
            bound.http_method.upper(),
            bound.path_template,
            bound.name,
            ", ".join(a.identifier for a in bound.arguments),
        )
        return bound

    def _schema_type(
        self,
        bound: BoundOperation,
        schema: SchemaNode,
        promoted_name: str,
        type_names: Set[str],
    ) -> TypeRef:
        resolved = self.resolver.resolve(schema)
        if resolved is not None and resolved.is_resolved():
            return resolved

        # Анонимная схема: поднимаем в тип группы (ожидается редко)
        anonymous = schema
        while anonymous.kind == SchemaKind.ARRAY and anonymous.items is not None:
            anonymous = anonymous.items

        type_name = self.namer.unique(promoted_name, type_names)
        promoted = self.emitter.emit(PROMOTED_NAMESPACE, type_name, anonymous)
        bound.promoted_types.append(promoted)

        element = TypeRef.named(PROMOTED_NAMESPACE, type_name)
        return resolved.with_innermost(element) if resolved is not None else element

    def _method_name(self, operation: Operation, taken: Set[str]) -> str:
        if operation.id:
            raw = operation.id
        else:
            words = [
                part
                for part in re.split(r"[/{}]+", operation.path_template)
                if part
            ]
            raw = operation.http_method.lower() + "".join(
                self.namer.capitalize(self.namer.sanitize(word)) for word in words
            )

        name, _ = self.namer.disambiguate(
            raw,
            self.namer.sanitize(raw),
            "Operation",
            taken,
            ARGUMENT_RESERVED_WORDS | {"client"},
        )
        return name
