"""
Разбор OpenAPI документа в неизменяемую модель ApiDescription
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
import jsonref

from ...exceptions import SpecLoadError
from ..types.spec import (
    ApiDescription,
    Content,
    Operation,
    ParameterLocation,
    ParameterSpec,
    PathItem,
    ResponseSpec,
    SchemaKind,
    SchemaNode,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_KINDS = {
    "integer": SchemaKind.INTEGER,
    "number": SchemaKind.NUMBER,
    "string": SchemaKind.STRING,
    "boolean": SchemaKind.BOOLEAN,
    "array": SchemaKind.ARRAY,
    "object": SchemaKind.OBJECT,
}

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
_XML_TYPES = ("application/xml", "text/xml")


def load_openapi(source: str, timeout: float = 30.0) -> Dict[str, Any]:
    """
    Загрузка OpenAPI документа из локального JSON файла или по URL.

    Для URL без расширения .json запрашивается <url>/openapi.json.
    """
    try:
        if source.startswith(("http://", "https://")):
            url = source
            if not url.endswith(".json"):
                url = url.rstrip("/") + "/openapi.json"
            logger.info("Загрузка спецификации %s", url)
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
            document = response.json()
        elif os.path.exists(source):
            logger.info("Чтение спецификации %s", source)
            with open(source, "r", encoding="utf-8") as f:
                document = json.load(f)
        else:
            raise SpecLoadError("файл не найден", source)
    except httpx.HTTPError as exc:
        raise SpecLoadError(f"ошибка загрузки: {exc}", source) from exc
    except (OSError, ValueError) as exc:
        raise SpecLoadError(f"некорректный JSON: {exc}", source) from exc

    if not isinstance(document, dict):
        raise SpecLoadError("корень документа должен быть объектом", source)
    return document


class OpenApiParser:
    """Парсер OpenAPI спецификации"""

    def __init__(self, openapi_dict: Dict[str, Any], source: Optional[str] = None):
        if not isinstance(openapi_dict, dict):
            raise SpecLoadError("корень документа должен быть объектом", source)
        self.source = source
        # Ссылки на схемы не раскрываются: они нужны как имена типов
        self.document = jsonref.replace_refs(openapi_dict, lazy_load=True)

    def parse(self) -> ApiDescription:
        """Парсинг OpenAPI в ApiDescription"""
        try:
            return self._parse()
        except (AttributeError, TypeError, KeyError) as exc:
            raise SpecLoadError(f"некорректная структура: {exc}", self.source) from exc

    def _parse(self) -> ApiDescription:
        info = self.document.get("info") or {}
        components = self.document.get("components") or {}

        tags = []
        for tag in self.document.get("tags") or []:
            if tag["name"] not in tags:
                tags.append(tag["name"])

        paths = [
            self._path_item(template, self._follow(item))
            for template, item in (self.document.get("paths") or {}).items()
        ]

        schemas = {
            name: self._schema(schema)
            for name, schema in (components.get("schemas") or {}).items()
        }
        responses = {
            name: self._content(self._follow(response).get("content"))
            for name, response in (components.get("responses") or {}).items()
        }

        api = ApiDescription(
            title=str(info.get("title") or ""),
            version=str(info["version"]) if info.get("version") is not None else None,
            tags=tuple(tags),
            paths=tuple(paths),
            schemas=schemas,
            responses=responses,
        )
        logger.info(
            "%s: путей %d, схем %d, ответов %d",
            api.title or "API",
            len(api.paths),
            len(api.schemas),
            len(api.responses),
        )
        return api

    def _follow(self, node: Any) -> Any:
        """Раскрытие ссылки на ответ, тело запроса, параметр или путь"""
        while isinstance(node, jsonref.JsonRef):
            try:
                node = node.__subject__
            except jsonref.JsonRefError as exc:
                raise SpecLoadError(
                    f"не удалось разрешить ссылку {exc.reference}", self.source
                ) from exc
        return node

    def _path_item(self, template: str, item: Dict[str, Any]) -> PathItem:
        parameters = self._parameters(item.get("parameters"))

        operations = []
        for method, spec in item.items():
            if method.lower() not in HTTP_METHODS:
                continue
            spec = self._follow(spec)

            request_body = None
            if spec.get("requestBody") is not None:
                request_body = self._content(
                    self._follow(spec["requestBody"]).get("content")
                )

            responses = []
            for status, response in (spec.get("responses") or {}).items():
                response = self._follow(response)
                responses.append(
                    ResponseSpec(
                        status=str(status),
                        content=self._content(response.get("content"))
                        if response.get("content")
                        else None,
                    )
                )

            operations.append(
                Operation(
                    id=spec.get("operationId"),
                    http_method=method.upper(),
                    path_template=template,
                    parameters=self._parameters(spec.get("parameters")),
                    request_body=request_body,
                    responses=tuple(responses),
                    tags=tuple(dict.fromkeys(spec.get("tags") or [])),
                )
            )

        return PathItem(
            template=template, parameters=parameters, operations=tuple(operations)
        )

    def _parameters(self, nodes: Optional[List[Any]]) -> tuple:
        parameters = []
        for node in nodes or []:
            node = self._follow(node)
            try:
                location = ParameterLocation(node.get("in"))
            except ValueError:
                logger.warning("Параметр %s: неизвестное место %r", node.get("name"), node.get("in"))
                continue

            # Swagger 2.0: тип описан прямо в параметре
            schema = node.get("schema")
            if schema is None and "type" in node:
                schema = node

            parameters.append(
                ParameterSpec(
                    name=node["name"],
                    location=location,
                    schema_node=self._schema(schema) if schema is not None else None,
                )
            )
        return tuple(parameters)

    def _content(self, content: Optional[Dict[str, Any]]) -> Content:
        variants: Dict[str, SchemaNode] = {}

        for media_type, media in (content or {}).items():
            base = media_type.split(";")[0].strip().lower()
            if base == "application/json" or base.endswith("+json"):
                variant = "json_schema"
            elif base in _FORM_TYPES:
                variant = "form_schema"
            elif base in _XML_TYPES or base.endswith("+xml"):
                variant = "xml_schema"
            else:
                continue

            media = self._follow(media) or {}
            if variant not in variants and media.get("schema") is not None:
                variants[variant] = self._schema(media["schema"])

        return Content(**variants)

    def _schema(self, node: Any) -> SchemaNode:
        if isinstance(node, jsonref.JsonRef):
            return SchemaNode.ref(node.__reference__["$ref"])

        if not isinstance(node, dict):
            return SchemaNode(kind=SchemaKind.OBJECT)

        if isinstance(node.get("$ref"), str):
            return SchemaNode.ref(node["$ref"])

        # Композиция из одной схемы - это сама схема
        for composition in ("allOf", "oneOf", "anyOf"):
            members = node.get(composition)
            if isinstance(members, list) and len(members) == 1:
                return self._schema(members[0])

        schema_type = node.get("type")
        if isinstance(schema_type, list):
            # OpenAPI 3.1: ["string", "null"]
            schema_type = next((t for t in schema_type if t != "null"), None)

        if schema_type is None:
            if "items" in node:
                schema_type = "array"
            else:
                schema_type = "object"

        kind = _KINDS.get(schema_type, SchemaKind.OBJECT)
        return SchemaNode(
            kind=kind,
            format=node.get("format"),
            properties={
                name: self._schema(value)
                for name, value in (node.get("properties") or {}).items()
            }
            if kind == SchemaKind.OBJECT
            else {},
            items=self._schema(node["items"])
            if kind == SchemaKind.ARRAY and node.get("items") is not None
            else None,
        )
