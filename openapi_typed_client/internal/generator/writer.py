import logging
from pathlib import Path
from typing import List, Union

from ...exceptions import ArtifactWriteError
from ..types.models import Project

logger = logging.getLogger(__name__)


def write_project(project: Project, target_dir: Union[str, Path]) -> List[Path]:
    """
    Запись всех файлов проекта в target_dir.

    Ошибка записи одного файла не останавливает запись остальных;
    в конце поднимается ArtifactWriteError со списком неудачных файлов.
    """
    target_dir = Path(target_dir)
    written: List[Path] = []
    failed: List[str] = []

    for code_file in project.files:
        file_path = target_dir / code_file.file_name
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(str(code_file), encoding="utf-8")
        except OSError as exc:
            logger.error("Не удалось записать %s: %s", file_path, exc)
            failed.append(code_file.file_name)
            continue

        logger.debug("Записан %s", file_path)
        written.append(file_path)

    if failed:
        raise ArtifactWriteError(failed)

    logger.info("Записано файлов: %d в %s", len(written), target_dir)
    return written
