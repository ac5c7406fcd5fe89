"""Модели данных для расследования стектрейсов."""

from dataclasses import dataclass
from enum import Enum

import pathspec

UNKNOWN_FUNCTION = "<unknown>"


@dataclass(frozen=True)
class StackFrame:
    """Один фрейм стектрейса."""

    filename: str  # только имя файла, без директорий
    function: str
    line: int
    column: int | None = None


class LineRole(str, Enum):
    """Положение строки относительно целевой."""

    BEFORE = "before"
    TARGET = "target"
    AFTER = "after"


@dataclass(frozen=True)
class RelevantLine:
    """Строка исходника с номером и ролью в окне контекста."""

    line_number: int
    content: str
    role: LineRole


@dataclass(frozen=True)
class ContextWindow:
    """Окно строк вокруг целевой строки."""

    path: str
    target_line: int
    lines: tuple[RelevantLine, ...]
    containing_function: str = UNKNOWN_FUNCTION

    @property
    def first_line(self) -> int:
        return self.lines[0].line_number

    @property
    def last_line(self) -> int:
        return self.lines[-1].line_number


@dataclass(frozen=True)
class FileAnalysis:
    """Результат анализа одного файла."""

    path: str
    content: str
    line_count: int
    functions: tuple[str, ...]
    imports: tuple[str, ...]
    relevant_lines: tuple[RelevantLine, ...] | None = None


@dataclass(frozen=True)
class ParsedSource:
    """Функции и импорты, найденные в исходнике."""

    functions: tuple[str, ...]
    imports: tuple[str, ...]


class FrameStatus(str, Enum):
    """Исход анализа одного фрейма."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"  # файла нет в кодовой базе (внешняя библиотека?)
    NO_CONTEXT = "no_context"  # строка за пределами файла


@dataclass(frozen=True)
class FrameAnalysis:
    """Фрейм вместе с найденным файлом и окном контекста."""

    frame: StackFrame
    status: FrameStatus
    path: str | None = None
    window: ContextWindow | None = None


@dataclass(frozen=True)
class StackTraceAnalysis:
    """Результат анализа стектрейса."""

    frames: tuple[StackFrame, ...]
    results: tuple[FrameAnalysis, ...]

    @property
    def parsed(self) -> bool:
        """False, если не удалось распознать ни одного фрейма."""
        return bool(self.frames)


@dataclass(frozen=True)
class ScanContext:
    """Правила игнорирования для одного сканирования."""

    root: str
    ignore_spec: pathspec.PathSpec | None = None

    def is_ignored(self, rel_path: str) -> bool:
        """Проверить путь (относительно root) по .gitignore."""
        if self.ignore_spec is None:
            return False
        return self.ignore_spec.match_file(rel_path)
