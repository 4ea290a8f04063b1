"""
Конфигурация для генерации API клиента
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import toml

from .exceptions import ConfigError

CONFIG_FILE = "openapi.toml"

MODE_SOURCES = "sources"
MODE_PROJECT = "project"


@dataclass
class GeneratorConfig:
    """Конфигурация генератора типизированного клиента"""

    url: Optional[str] = None
    dirname: Optional[str] = None
    package: str = "api_client"
    mode: str = MODE_PROJECT

    # Имя API: по умолчанию из title спецификации
    api_name: Optional[str] = None

    # Используются только в манифесте полного проекта
    artifact_id: Optional[str] = None
    group_id: Optional[str] = None
    version: Optional[str] = None

    # Файлы с фрагментами кода для корневого клиента, в порядке вставки
    snippets: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.mode not in (MODE_SOURCES, MODE_PROJECT):
            raise ConfigError(
                f"mode должен быть '{MODE_SOURCES}' или '{MODE_PROJECT}', а не {self.mode!r}"
            )
        if not self.package:
            raise ConfigError("package не может быть пустым")

    @property
    def sources_only(self) -> bool:
        return self.mode == MODE_SOURCES

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE, search_dir: str = None
    ) -> Optional["GeneratorConfig"]:
        """Загрузка конфигурации из файла; None, если файла нет"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except toml.TomlDecodeError as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc

        snippets = config_data.get("snippets", [])
        if isinstance(snippets, str):
            snippets = [snippets]

        return cls(
            url=config_data.get("url"),
            dirname=config_data.get("dirname", "api_client"),
            package=config_data.get("package", "api_client"),
            mode=config_data.get("mode", MODE_PROJECT),
            api_name=config_data.get("api_name"),
            artifact_id=config_data.get("artifact_id"),
            group_id=config_data.get("group_id"),
            version=config_data.get("version"),
            snippets=list(snippets),
        )

    def save_to_file(self, config_path: str = CONFIG_FILE) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            "url": self.url,
            "dirname": self.dirname,
            "package": self.package,
            "mode": self.mode,
            "api_name": self.api_name,
            "artifact_id": self.artifact_id,
            "group_id": self.group_id,
            "version": self.version,
            "snippets": self.snippets,
        }
        # toml не умеет записывать None
        config_data = {
            key: value for key, value in config_data.items() if value is not None
        }

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "GeneratorConfig":
        """Объединение с аргументами командной строки"""
        return GeneratorConfig(
            url=args.url or self.url,
            dirname=args.dirname or self.dirname,
            package=args.package or self.package,
            mode=MODE_SOURCES if args.sources_only else self.mode,
            api_name=args.api_name or self.api_name,
            artifact_id=args.artifact_id or self.artifact_id,
            group_id=args.group_id or self.group_id,
            version=args.version or self.version,
            snippets=list(args.snippet or self.snippets),
        )

    def load_snippets(self) -> List[str]:
        """Текст фрагментов в порядке объявления"""
        texts = []
        for path in self.snippets:
            if not os.path.isfile(path):
                raise ConfigError(f"Файл фрагмента не найден: {path}")
            with open(path, "r", encoding="utf-8") as f:
                texts.append(f.read())
        return texts
