"""
Ошибки генератора
"""

from typing import List, Optional


class GeneratorError(Exception):
    """Базовая ошибка генерации"""


class SpecLoadError(GeneratorError):
    """Спецификация не читается или не разбирается"""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class ResolutionError(GeneratorError):
    """Некорректная ссылка на компонент ($ref)"""

    def __init__(self, reference: str, message: str = "некорректная ссылка"):
        self.reference = reference
        self.message = message
        super().__init__(f"{message}: {reference!r}")


class ConfigError(GeneratorError):
    """Некорректная конфигурация генератора"""


class ArtifactWriteError(GeneratorError):
    """Часть артефактов не удалось записать"""

    def __init__(self, failed: List[str]):
        self.failed = failed
        super().__init__(
            f"Не удалось записать {len(failed)} файл(ов): " + ", ".join(failed)
        )
