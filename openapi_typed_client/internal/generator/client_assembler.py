import logging
from typing import Dict, List, Optional, Set

from ..types.ir import ClientFacade, ErrorType, GeneratedType, TagGroup
from ..types.spec import ApiDescription
from ..types.type_resolver import TypeResolver
from ..utils.naming import RESERVED_WORDS, IdentifierNamer
from .class_emitter import ClassEmitter
from .operation_binder import OperationBinder
from .templates import templates

logger = logging.getLogger(__name__)

DEFAULT_TAG = "default"


class ClientAssembler:
    """Сборка фасада клиента: типы данных, группы операций и ошибка"""

    def __init__(self, api: ApiDescription, api_name: Optional[str] = None):
        self.api = api
        self.resolver = TypeResolver()
        self.namer = IdentifierNamer()
        self.emitter = ClassEmitter(self.resolver, self.namer)
        self.binder = OperationBinder(self.resolver, self.namer, self.emitter)
        self.api_name = api_name or self.namer.type_name(api.title)

    def assemble(self, snippets: Optional[List[str]] = None) -> ClientFacade:
        facade = ClientFacade(
            api_name=self.api_name,
            client_name=f"{self.api_name}Client",
            error=ErrorType(name=f"{self.api_name}Error"),
            snippets=list(snippets or []),
        )

        # Имена классов назначаются до генерации: на них ссылаются $ref
        self._register_names("schemas", self.api.schemas)
        self._register_names("responses", self.api.responses)

        facade.schemas = self._emit_components("schemas", self.api.schemas.items())
        facade.responses = self._emit_components(
            "responses",
            (
                (name, content.preferred_schema())
                for name, content in self.api.responses.items()
            ),
        )
        facade.tags = self._group_operations()

        logger.info(
            "%s: схем %d, ответов %d, групп %d",
            facade.client_name,
            len(facade.schemas),
            len(facade.responses),
            len(facade.tags),
        )
        return facade

    def _emit_components(self, namespace: str, components) -> List[GeneratedType]:
        generated = []
        for name, schema in components:
            # Ответ без содержимого не порождает тип
            if schema is None:
                continue
            class_name = self.resolver.names[(namespace, name)]
            generated.append(self.emitter.emit(namespace, class_name, schema))
        return generated

    def _register_names(self, namespace: str, components: Dict[str, object]):
        """
        Имена классов компонентов, уникальные в пределах раздела.

        Имена, которые уже годятся как есть, занимаются первыми, чтобы
        'Pet-Response' не отнял имя у соседнего 'PetResponse'.
        """
        taken: Set[str] = set()
        pending = []
        for name in components:
            if self.namer.class_name(name) == name and name not in taken:
                taken.add(name)
                self.resolver.register(namespace, name, name)
            else:
                pending.append(name)

        for name in pending:
            class_name = self.namer.unique(self.namer.class_name(name), taken)
            self.resolver.register(namespace, name, class_name)
            logger.debug("%s.%s -> %s", namespace, name, class_name)

    def _tag_order(self) -> List[str]:
        """Объявленные теги, затем необъявленные в порядке появления"""
        order = list(dict.fromkeys(self.api.tags))
        for path_item in self.api.paths:
            for operation in path_item.operations:
                for tag in operation.tags or (DEFAULT_TAG,):
                    if tag not in order:
                        order.append(tag)
        return order

    def _group_operations(self) -> List[TagGroup]:
        groups: Dict[str, TagGroup] = {}
        attributes: Set[str] = set()
        class_names: Set[str] = set()
        modules: Set[str] = set()

        for tag in self._tag_order():
            attribute, _ = self.namer.disambiguate(
                tag,
                self.namer.attribute_name(tag),
                "Tag",
                attributes,
                RESERVED_WORDS | templates.client_members,
            )
            base_name = self.namer.type_name(tag, fallback="Default")
            class_name = self.namer.unique(f"{base_name}Tag", class_names)
            module = self.namer.unique(self.namer.module_name(base_name), modules)
            groups[tag] = TagGroup(
                tag=tag, attribute=attribute, class_name=class_name, module=module
            )

        method_names: Dict[str, Set[str]] = {tag: set() for tag in groups}
        type_names: Dict[str, Set[str]] = {tag: set() for tag in groups}

        for path_item in self.api.paths:
            for operation in path_item.operations:
                for tag in operation.tags or (DEFAULT_TAG,):
                    groups[tag].operations.append(
                        self.binder.bind(
                            path_item, operation, method_names[tag], type_names[tag]
                        )
                    )

        return list(groups.values())
