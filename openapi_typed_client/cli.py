import argparse
import logging
import os
import sys

from openapi_typed_client.config import (
    CONFIG_FILE,
    MODE_PROJECT,
    MODE_SOURCES,
    GeneratorConfig,
)
from openapi_typed_client.exceptions import ConfigError, GeneratorError
from openapi_typed_client.generator import ApiClientGenerator
from openapi_typed_client.internal.generator.writer import write_project
from openapi_typed_client.internal.parser.openapi import load_openapi
from openapi_typed_client.internal.types.models import Project


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Генерация типизированного Python клиента из OpenAPI"
    )
    parser.add_argument("--url", type=str, help="URL или путь к OpenAPI спецификации")
    parser.add_argument(
        "--dirname", "--out", dest="dirname", type=str, help="Директория для генерации"
    )
    parser.add_argument("--package", type=str, help="Имя пакета клиента")
    parser.add_argument("--api-name", dest="api_name", type=str, help="Имя API")
    parser.add_argument("--artifact-id", dest="artifact_id", type=str)
    parser.add_argument("--group-id", dest="group_id", type=str)
    parser.add_argument("--version", type=str, help="Версия пакета клиента")
    parser.add_argument(
        "--snippet",
        action="append",
        help="Файл с кодом для вставки в класс клиента (можно несколько)",
    )
    parser.add_argument(
        "-s",
        "--sources-only",
        dest="sources_only",
        action="store_true",
        help="Только исходники, без pyproject.toml",
    )
    parser.add_argument(
        "--init-config", action="store_true", help="Создать конфиг файл openapi.toml"
    )
    parser.add_argument(
        "--force", action="store_true", help="Генерировать без подтверждения"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")
    return parser


def _generate_client_core(config: GeneratorConfig) -> Project:
    """Ядро генерации клиента - только генерация без сохранения"""
    if not config.url:
        raise ConfigError("URL не указан в конфигурации")

    print(f"🚀 Генерация клиента из {config.url}")

    print("📥 Загрузка OpenAPI спецификации...")
    openapi_spec = load_openapi(config.url)
    snippets = config.load_snippets()

    print("⚙️ Генерация кода...")
    generator = ApiClientGenerator(
        openapi_spec, config, snippets=snippets, source_url=config.url
    )
    return generator.generate()


def _generate_client(config: GeneratorConfig, work_dir: str) -> str:
    """Генерация клиента в директорию config.dirname"""
    project = _generate_client_core(config)
    work_path = os.path.join(work_dir, config.dirname or ".")

    print(f"💾 Сохранение {len(project.files)} файлов...")
    write_project(project, work_path)

    print("✅ Генерация завершена успешно!")
    print(f"📦 Клиент создан в: {os.path.abspath(work_path)}")
    return work_path


def _resolve_config(args) -> GeneratorConfig:
    file_config = GeneratorConfig.from_file(search_dir=args.dirname)
    has_args = any(
        (
            args.url,
            args.package,
            args.api_name,
            args.artifact_id,
            args.group_id,
            args.version,
            args.snippet,
            args.sources_only,
        )
    )

    if file_config and has_args:
        # Есть и конфиг и аргументы - спрашиваем пользователя
        print(f"🔧 Найден конфиг файл {CONFIG_FILE}:")
        print(f"   URL: {file_config.url}")
        print(f"   Пакет: {file_config.package}")
        print()

        if args.force or not confirm_choice("Использовать конфиг из файла?"):
            return file_config.merge_with_args(args)
        return file_config

    if file_config:
        print(f"📋 Используется конфиг из {CONFIG_FILE}")
        return file_config.merge_with_args(args)

    return GeneratorConfig(dirname=args.dirname or ".").merge_with_args(args)


def generate():
    """Универсальная команда генерации клиента"""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        # Инициализация конфига
        if args.init_config:
            config = GeneratorConfig(
                url=args.url,
                dirname=args.dirname or ".",
                package=args.package or "api_client",
                mode=MODE_SOURCES if args.sources_only else MODE_PROJECT,
                api_name=args.api_name,
                artifact_id=args.artifact_id,
                group_id=args.group_id,
                version=args.version,
                snippets=list(args.snippet or []),
            )
            config.save_to_file()
            print(f"✅ Создан конфиг файл {CONFIG_FILE}")
            return

        final_config = _resolve_config(args)
        if not final_config.url:
            print("❌ Ошибка: Укажите --url или создайте конфиг с --init-config")
            sys.exit(1)

        print(f"📁 Генерация в: {final_config.dirname}")
        _generate_client(final_config, ".")

    except GeneratorError as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)


if __name__ == "__main__":
    generate()
