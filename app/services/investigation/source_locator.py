"""Поиск файла фрейма в кодовой базе."""

import os
import logging

from .config import InvestigationConfig
from .models import StackFrame

logger = logging.getLogger(__name__)


def read_source_file(path: str) -> str | None:
    """Прочитать файл как UTF-8. Ошибки чтения и декодирования дают None."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"[Locator] Could not read {path}: {e}")
        return None


class SourceLocator:
    """Сопоставление имени файла из стектрейса с путём в кодовой базе."""

    def __init__(self, config: InvestigationConfig):
        self.config = config

    def candidates(self, frame: StackFrame, repo_path: str) -> list[str]:
        """Пути-кандидаты в порядке проверки: root/, root/src/, root/app/."""
        return [
            os.path.join(repo_path, prefix, frame.filename)
            for prefix in self.config.resolution_prefixes
        ]

    def locate(self, frame: StackFrame, repo_path: str) -> tuple[str, str] | None:
        """
        Найти и прочитать файл фрейма.

        Returns:
            (путь, содержимое) первого читаемого кандидата или None
        """
        for path in self.candidates(frame, repo_path):
            if not os.path.isfile(path):
                continue

            content = read_source_file(path)
            if content is not None:
                return path, content

        logger.debug(f"[Locator] {frame.filename} not found in {repo_path}")
        return None

    def resolve(self, frame: StackFrame, repo_path: str) -> str | None:
        """Путь к файлу фрейма или None, если файла нет (внешний код)."""
        located = self.locate(frame, repo_path)
        return located[0] if located else None
