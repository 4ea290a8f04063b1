"""
Главный модуль генератора - чистый интерфейс
"""

from typing import Any, Dict, List, Optional, Union

from .config import GeneratorConfig
from .internal.generator.client_assembler import ClientAssembler
from .internal.generator.python_printer import PythonPrinter
from .internal.parser.openapi import OpenApiParser
from .internal.types.ir import ClientFacade
from .internal.types.models import Project
from .internal.types.spec import ApiDescription

DEFAULT_VERSION = "1.0"


class ApiClientGenerator:
    """Чистый интерфейс для генерации API клиентов"""

    def __init__(
        self,
        openapi_spec: Union[Dict[str, Any], ApiDescription],
        config: Optional[GeneratorConfig] = None,
        snippets: Optional[List[str]] = None,
        source_url: str = None,
    ):
        if isinstance(openapi_spec, ApiDescription):
            self.api = openapi_spec
        else:
            self.api = OpenApiParser(openapi_spec, source_url).parse()

        self.config = config or GeneratorConfig()
        self.snippets = list(snippets or [])

    def assemble(self) -> ClientFacade:
        """Промежуточное дерево: типы, группы операций, ошибка"""
        assembler = ClientAssembler(self.api, self.config.api_name)
        return assembler.assemble(self.snippets)

    def generate(self) -> Project:
        """Генерация проекта клиента"""
        facade = self.assemble()
        printer = PythonPrinter(self.config.package, self._manifest(facade))
        return printer.print(facade)

    def _manifest(self, facade: ClientFacade) -> Optional[Dict[str, str]]:
        if self.config.sources_only:
            return None

        return {
            "artifact_id": self.config.artifact_id or facade.api_name,
            "group_id": self.config.group_id or self.config.package,
            "version": self.config.version or self.api.version or DEFAULT_VERSION,
            "description": f"{self.api.title or facade.api_name} client",
        }


def generate_client(
    openapi_spec: Union[Dict[str, Any], ApiDescription],
    config: Optional[GeneratorConfig] = None,
    snippets: Optional[List[str]] = None,
) -> Project:
    """Создание API клиента из OpenAPI спецификации"""
    generator = ApiClientGenerator(openapi_spec, config, snippets)
    return generator.generate()
