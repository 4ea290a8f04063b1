"""
Отрисовка фасада клиента в дерево файлов Python пакета.

Все решения об именах и типах уже приняты в ClientFacade; здесь только
синтаксис: pydantic модели, классы групп операций и корневой клиент.
"""

import json
import logging
from typing import Dict, List, Optional, Set, Tuple

import toml

from ..types.ir import (
    AccessorKind,
    BoundOperation,
    ClientFacade,
    GeneratedField,
    GeneratedType,
    Primitive,
    TypeRef,
)
from ..types.models import Class, CodeBlock, CodeFile, Function, Parameter, Project, Variable
from ..utils.naming import IdentifierNamer
from .operation_binder import PROMOTED_NAMESPACE
from .templates import templates

logger = logging.getLogger(__name__)

_PRIMITIVES = {
    Primitive.INT32: "int",
    Primitive.INT64: "int",
    Primitive.FLOAT: "float",
    Primitive.DOUBLE: "float",
    Primitive.STRING: "str",
    Primitive.UUID: "UUID",
    Primitive.BOOLEAN: "bool",
    Primitive.UNTYPED_OBJECT: "Any",
}

# Порядок членов класса модели: вложенные классы, конфиг, поля, методы
_ORDER_NESTED = 40
_ORDER_CONFIG = 30
_ORDER_FIELD = 20
_ORDER_METHOD = 10


def _docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class _ModuleImports:
    """Импорты, которые понадобились при отрисовке одного модуля"""

    def __init__(self, own_namespace: str, reserved: Set[str]):
        self.own_namespace = own_namespace
        self.namespaces: Set[str] = set()
        # (пространство, имя) -> локальное имя прямого импорта
        self.direct: Dict[Tuple[str, str], str] = {}
        self._local_names = set(reserved)

    def use_namespace(self, namespace: str):
        self.namespaces.add(namespace)

    def use_direct(self, namespace: str, name: str) -> str:
        key = (namespace, name)
        if key not in self.direct:
            local = name
            if local in self._local_names:
                local = IdentifierNamer.capitalize(namespace) + name
            self._local_names.add(local)
            self.direct[key] = local
        return self.direct[key]


class PythonPrinter:
    """Отрисовка ClientFacade в Project с файлами пакета"""

    def __init__(
        self,
        package: str = "api_client",
        manifest: Optional[Dict[str, str]] = None,
    ):
        self.package = package
        self.package_dir = package.replace(".", "/")
        self.manifest = manifest
        self.namer = IdentifierNamer()
        # (пространство, имя типа) -> имя модуля
        self.modules: Dict[Tuple[str, str], str] = {}
        self.types: Dict[Tuple[str, str], GeneratedType] = {}

    def print(self, facade: ClientFacade) -> Project:
        project = Project(name=self.package)
        self._assign_modules(facade)

        self._add_file(project, "common.py", "common").add_code_block(
            CodeBlock(code=templates.common)
        )
        self._add_file(project, "exceptions.py", facade.error.name).add_code_block(
            CodeBlock(code=templates.error.format(error_name=facade.error.name))
        )

        for namespace, types in (
            ("schemas", facade.schemas),
            ("responses", facade.responses),
        ):
            self._print_namespace(project, namespace, types)

        self._print_tags(project, facade)
        self._print_client(project, facade)
        self._print_package_init(project, facade)

        if self.manifest is not None:
            project.add_file(
                "pyproject.toml", artifact="pyproject.toml"
            ).add_code_block(CodeBlock(code=self._manifest_text()))

        logger.info("%s: файлов %d", self.package, len(project.files))
        return project

    # --- Имена модулей -------------------------------------------------

    def _assign_modules(self, facade: ClientFacade):
        self.modules = {}
        self.types = {}
        for namespace, types in (
            ("schemas", facade.schemas),
            ("responses", facade.responses),
        ):
            taken: Set[str] = set()
            for generated in types:
                self.modules[(namespace, generated.name)] = self.namer.unique(
                    self.namer.module_name(generated.name), taken
                )
                self.types[(namespace, generated.name)] = generated

    def _is_model(self, namespace: str, name: str, seen: Optional[Set] = None) -> bool:
        """Тип отрисовывается классом: модель или наследник модели"""
        generated = self.types.get((namespace, name))
        if generated is None:
            return False

        target = generated.alias_of
        if target is None:
            return True
        if not target.is_named:
            return False

        seen = seen if seen is not None else set()
        if (namespace, name) in seen:
            return False
        seen.add((namespace, name))
        return self._is_model(target.component, target.path[0], seen)

    def _add_file(
        self, project: Project, relative: str, artifact: str, namespace: str = ""
    ) -> CodeFile:
        dotted = ".".join(part for part in (self.package, namespace) if part)
        return project.add_file(
            f"{self.package_dir}/{relative}", namespace=dotted, artifact=artifact
        )

    # --- Типы ----------------------------------------------------------

    def annotation(
        self, type_ref: Optional[TypeRef], imports: _ModuleImports, direct: bool = False
    ) -> Variable:
        """
        Аннотация типа.

        В модулях моделей именованные типы пишутся через пространство имен
        ('schemas.Pet') и разрешаются при model_rebuild. В модулях
        псевдонимов выражение вычисляется при импорте, поэтому типы
        импортируются напрямую (direct).
        """
        if type_ref is None:
            return Variable(value="None")

        if type_ref.is_array:
            return Variable(
                value=self.annotation(type_ref.items, imports, direct), wrap_name="List"
            )

        if type_ref.is_map:
            return Variable(
                value=["str", self.annotation(type_ref.items, imports, direct)],
                wrap_name="Dict",
            )

        if type_ref.primitive is not None:
            return Variable(value=_PRIMITIVES[type_ref.primitive])

        if type_ref.component == PROMOTED_NAMESPACE == imports.own_namespace:
            return Variable(value=".".join(type_ref.path))

        if (type_ref.component, type_ref.path[0]) not in self.modules:
            logger.warning(
                "Ссылка на неизвестный компонент %s, используется Any", type_ref
            )
            return Variable(value="Any")

        if direct:
            local = imports.use_direct(type_ref.component, type_ref.path[0])
            return Variable(value=".".join((local,) + type_ref.path[1:]))

        imports.use_namespace(type_ref.component)
        return Variable(value=".".join((type_ref.component,) + type_ref.path))

    def _namespace_imports(self, imports: _ModuleImports, depth: int) -> List[str]:
        lines = []
        parent = "." * depth
        if imports.namespaces:
            lines.append(f"from {parent} import {', '.join(sorted(imports.namespaces))}")

        for (namespace, name), local in imports.direct.items():
            if namespace == imports.own_namespace:
                source = f".{self.modules[(namespace, name)]}"
            else:
                source = f"{parent}{namespace}.{self.modules[(namespace, name)]}"
            alias = f" as {local}" if local != name else ""
            lines.append(f"from {source} import {name}{alias}")
        return lines

    def _print_namespace(
        self, project: Project, namespace: str, types: List[GeneratedType]
    ):
        init_file = self._add_file(
            project, f"{namespace}/__init__.py", "__init__", namespace
        )

        for generated in types:
            module = self.modules[(namespace, generated.name)]
            code_file = self._add_file(
                project, f"{namespace}/{module}.py", generated.name, namespace
            )
            imports = _ModuleImports(namespace, {generated.name})

            if generated.alias_of is not None and self._is_model(namespace, generated.name):
                # Псевдоним именованного типа - наследник, чтобы остаться моделью
                base = self.annotation(generated.alias_of, imports, direct=True)
                code_file.imports.extend(self._namespace_imports(imports, 2))
                code_file.add_class(generated.name, inherits=[str(base)])
            elif generated.alias_of is not None:
                expression = self.annotation(generated.alias_of, imports, direct=True)
                code_file.imports.extend(templates.alias_header)
                extra = self._namespace_imports(imports, 2)
                if extra:
                    code_file.imports.extend([""] + extra)
                code_file.add_code_block(f"{generated.name} = {expression}")
            else:
                # schemas и responses здесь не импортируются: ссылки на них
                # вычисляются в model_rebuild из корневого __init__
                code_file.imports.extend(templates.model_header)
                code_file.add_class(self._model_class(generated, imports))

            init_file.imports.append(f"from .{module} import {generated.name}")

        if types:
            names = ", ".join(f'"{generated.name}"' for generated in types)
            init_file.add_code_block(f"__all__ = [{names}]")

    def _model_class(self, generated: GeneratedType, imports: _ModuleImports) -> Class:
        model = Class(name=generated.name, inherits=["BaseModel"])

        for order, nested in enumerate(generated.nested_types):
            nested_class = self._model_class(nested, imports)
            # Вложенные классы в порядке объявления
            nested_class.order = _ORDER_NESTED + len(generated.nested_types) - order
            model.add_class(nested_class)

        model.add_code_block(
            "model_config = ConfigDict(populate_by_name=True)", order=_ORDER_CONFIG
        )

        for field in generated.fields:
            field_type = self.annotation(field.type, imports)
            model.parameters.append(self._field_parameter(field, field_type))
            for function in self._accessors(field, field_type):
                model.add_function(function)

        return model

    @staticmethod
    def _field_parameter(field: GeneratedField, field_type: Variable) -> Parameter:
        default = "None"
        if field.serialized_alias is not None:
            default = f"Field(default=None, alias={json.dumps(field.serialized_alias)})"

        return Parameter(
            name=field.identifier,
            var_type=Variable(value=field_type, wrap_name="Optional"),
            default=Variable(value=default),
            order=_ORDER_FIELD,
        )

    @staticmethod
    def _accessors(field: GeneratedField, field_type: Variable) -> List[Function]:
        optional = str(Variable(value=field_type, wrap_name="Optional"))
        functions = []

        for accessor in field.accessors:
            if accessor.kind == AccessorKind.GETTER:
                function = Function(
                    name=accessor.name,
                    parameters=[Parameter(name="self")],
                    response=optional,
                    code=CodeBlock(code=f"return self.{field.identifier}"),
                )
            elif accessor.kind == AccessorKind.SETTER:
                function = Function(
                    name=accessor.name,
                    parameters=[
                        Parameter(name="self"),
                        Parameter(name="value", var_type=Variable(value=optional)),
                    ],
                    code=CodeBlock(code=f"self.{field.identifier} = value"),
                )
            else:
                # Не задано - значит ложь
                function = Function(
                    name=accessor.name,
                    parameters=[Parameter(name="self")],
                    response="bool",
                    code=CodeBlock(code=f"return self.{field.identifier} is True"),
                )
            function.order = _ORDER_METHOD
            functions.append(function)

        return functions

    # --- Группы операций -----------------------------------------------

    def _print_tags(self, project: Project, facade: ClientFacade):
        init_file = self._add_file(
            project, f"{PROMOTED_NAMESPACE}/__init__.py", "__init__", PROMOTED_NAMESPACE
        )

        for group in facade.tags:
            code_file = self._add_file(
                project,
                f"{PROMOTED_NAMESPACE}/{group.module}.py",
                group.class_name,
                PROMOTED_NAMESPACE,
            )
            imports = _ModuleImports(PROMOTED_NAMESPACE, {group.class_name})

            tag_class = code_file.add_class(
                group.class_name,
                description=_docstring(f"Операции группы {group.tag}"),
                order=-1,
            )
            tag_class.add_function(
                "__init__",
                parameters=[
                    Parameter(name="self"),
                    Parameter(
                        name="client", var_type=Variable(value=facade.client_name)
                    ),
                ],
                code=CodeBlock(code="self.client = client"),
                order=1,
            )

            for operation in group.operations:
                for promoted in operation.promoted_types:
                    code_file.add_class(self._model_class(promoted, imports))
                tag_class.add_function(self._operation_method(operation, imports))

            code_file.imports.extend(templates.tag_header)
            extra = self._namespace_imports(imports, 2)
            if extra:
                code_file.imports.extend([""] + extra)
            code_file.imports.extend(
                ["", "if TYPE_CHECKING:", f"    from ..client import {facade.client_name}"]
            )
            init_file.imports.append(f"from . import {group.module}")

    def _operation_method(
        self, operation: BoundOperation, imports: _ModuleImports
    ) -> Function:
        parameters = [Parameter(name="self")]
        for argument in operation.arguments:
            argument_type = self.annotation(argument.type, imports)
            parameter = Parameter(name=argument.identifier, var_type=argument_type)
            if argument.optional:
                parameter.set_type(Variable(value=argument_type, wrap_name="Optional"))
                parameter.set_default("None")
            parameters.append(parameter)

        path = " + ".join(
            json.dumps(segment.literal)
            if segment.literal is not None
            else f"str({segment.argument})"
            for segment in operation.path
        )
        request = [json.dumps(operation.http_method), path or '""']

        query = operation.query_argument
        if query is not None:
            request.append(f"params={query.identifier}")

        lines = []
        body = operation.body_argument
        if body is not None:
            body_type = self.annotation(body.type, imports)
            lines.append(
                f"_payload = TypeAdapter({body_type}).dump_python("
                f"{body.identifier}, mode=\"json\", by_alias=True)"
            )
            request.append("json=_payload")

        return_type = self.annotation(operation.return_type, imports)
        lines.append(
            f"_response = await self.client._send_request({', '.join(request)})"
        )
        lines.append(f"return self.client.or_error(_response, {return_type})")

        description = f"{operation.http_method.upper()} {operation.path_template}"
        return Function(
            name=operation.name,
            parameters=parameters,
            response=str(return_type),
            async_def=True,
            description=_docstring(description),
            code=CodeBlock(code="\n".join(lines)),
        )

    # --- Клиент и корень пакета ------------------------------------------

    def _print_client(self, project: Project, facade: ClientFacade):
        code_file = self._add_file(project, "client.py", facade.client_name)
        code_file.imports.extend(templates.client_header)
        code_file.imports.append(f"from .exceptions import {facade.error.name}")
        code_file.imports.extend(
            f"from .{PROMOTED_NAMESPACE}.{group.module} import {group.class_name}"
            for group in facade.tags
        )

        client = code_file.add_class(facade.client_name, inherits=["AiohttpClient"])
        init_code = ["super().__init__()"] + [
            f"self.{group.attribute} = {group.class_name}(self)" for group in facade.tags
        ]
        client.add_function(
            "__init__",
            parameters=[Parameter(name="self")],
            code=CodeBlock(code="\n".join(init_code)),
            order=3,
        )

        # Вставки - в порядке добавления, между конструктором и or_error
        for snippet in facade.snippets:
            if snippet.strip():
                client.add_code_block(snippet.strip("\n"), order=2)

        client.add_function(
            "or_error",
            parameters=[
                Parameter(name="self"),
                Parameter(name="response", var_type=Variable(value="RawResponse")),
                Parameter(
                    name="result_type",
                    var_type=Variable(value="Any"),
                    default=Variable(value="None"),
                ),
            ],
            response="Any",
            description=f"Результат вызова или {facade.error.name} для статуса вне 2xx",
            code=CodeBlock(code=templates.or_error.format(error_name=facade.error.name)),
            order=1,
        )

    def _print_package_init(self, project: Project, facade: ClientFacade):
        init_file = self._add_file(project, "__init__.py", "__init__")
        init_file.imports.extend(
            [
                "from . import schemas",
                "from . import responses",
                f"from . import {PROMOTED_NAMESPACE}",
                f"from .client import {facade.client_name}",
                f"from .exceptions import {facade.error.name}",
            ]
        )

        # Ссылки между модулями разрешаются после импорта всех моделей
        rebuild = []
        for namespace, types in (
            ("schemas", facade.schemas),
            ("responses", facade.responses),
        ):
            for generated in types:
                if not self._is_model(namespace, generated.name):
                    continue
                for model in generated.walk():
                    rebuild.append(f"{namespace}.{'.'.join(model.path)}.model_rebuild()")

        for group in facade.tags:
            for operation in group.operations:
                for promoted in operation.promoted_types:
                    for model in promoted.walk():
                        rebuild.append(
                            f"{PROMOTED_NAMESPACE}.{group.module}."
                            f"{'.'.join(model.path)}.model_rebuild()"
                        )

        if rebuild:
            # Аннотации моделей разрешаются по глобальным именам этого модуля
            rebuild.insert(0, "# Ссылки между моделями: schemas и responses берутся отсюда")
            init_file.add_code_block("\n".join(rebuild), order=1)
        init_file.add_code_block(
            f'__all__ = ["{facade.client_name}", "{facade.error.name}", '
            f'"schemas", "responses"]'
        )

    def _manifest_text(self) -> str:
        manifest = self.manifest or {}
        document = {
            "build-system": {
                "requires": ["setuptools>=61"],
                "build-backend": "setuptools.build_meta",
            },
            "project": {
                "name": manifest.get("artifact_id", self.package),
                "version": manifest.get("version", "1.0"),
                "description": manifest.get("description", ""),
                "requires-python": ">=3.10",
                "dependencies": ["aiohttp", "pydantic>=2"],
            },
            "tool": {
                "setuptools": {"packages": {"find": {"include": [f"{self.package}*"]}}},
                "openapi-typed-client": {
                    "group-id": manifest.get("group_id", self.package),
                    "package": self.package,
                },
            },
        }
        return toml.dumps(document)
