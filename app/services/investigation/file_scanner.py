"""Сканирование файлов кодовой базы с поддержкой gitignore."""

import os
import logging
from pathlib import Path
import pathspec

from .config import InvestigationConfig
from .models import ScanContext

logger = logging.getLogger(__name__)


def load_scan_context(repo_path: str) -> ScanContext:
    """Загрузить .gitignore кодовой базы. Нет файла - нет доп. исключений."""
    gitignore_path = Path(repo_path) / ".gitignore"
    if not gitignore_path.is_file():
        return ScanContext(root=repo_path)

    try:
        with open(gitignore_path, encoding="utf-8") as f:
            spec = pathspec.PathSpec.from_lines("gitwildmatch", f)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"[Scanner] Could not read {gitignore_path}: {e}")
        return ScanContext(root=repo_path)

    return ScanContext(root=repo_path, ignore_spec=spec)


class FileScanner:
    """Сканирование исходников кодовой базы с учётом .gitignore."""

    def __init__(self, config: InvestigationConfig):
        self.config = config

    def scan(self, repo_path: str, context: ScanContext | None = None) -> list[str]:
        """
        Сканировать кодовую базу и вернуть файлы для анализа.

        Сначала файлы основного языка, потом остальные. Список обрезается
        до max_files уже после фильтрации, без пересортировки.

        Returns:
            Список относительных путей к файлам
        """
        logger.info("[Scanner] Scanning files...")
        if context is None:
            context = load_scan_context(repo_path)

        groups: list[list[str]] = [[] for _ in self.config.extension_groups]

        for root, dirs, filenames in os.walk(repo_path):
            rel_root = os.path.relpath(root, repo_path)

            # Фильтруем директории, сортируем для стабильного порядка обхода
            dirs[:] = sorted(self._filter_directories(dirs, rel_root, context))

            for filename in sorted(filenames):
                group = self._extension_group(filename)
                if group is None:
                    continue

                rel_path = os.path.normpath(os.path.join(rel_root, filename))
                if context.is_ignored(rel_path):
                    continue

                groups[group].append(rel_path)

        files = [path for group in groups for path in group]
        logger.info(f"[Scanner] Found {len(files)} files")

        if len(files) > self.config.max_files:
            logger.info(f"[Scanner] Truncated to {self.config.max_files} files")
            files = files[: self.config.max_files]

        return files

    def _filter_directories(
        self, dirs: list[str], rel_root: str, context: ScanContext
    ) -> list[str]:
        """Фильтровать директории: служебные и по .gitignore."""
        filtered = [d for d in dirs if d not in self.config.excluded_dirs]

        return [
            d
            for d in filtered
            if not context.is_ignored(os.path.normpath(os.path.join(rel_root, d)) + "/")
        ]

    def _extension_group(self, filename: str) -> int | None:
        """Индекс группы расширений файла, None если файл не анализируем."""
        for index, extensions in enumerate(self.config.extension_groups):
            if filename.endswith(extensions):
                return index
        return None
