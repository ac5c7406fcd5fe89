"""Разбор текста стектрейса во фреймы."""

import logging
import re
from typing import Callable

from .models import StackFrame, UNKNOWN_FUNCTION

logger = logging.getLogger(__name__)

_DIRECTORY_PREFIX = re.compile(r"^.*[\\/]")


def _frame(path: str, function: str, line: str, column: str | None = None) -> StackFrame:
    """Собрать фрейм, оставив от пути только имя файла."""
    return StackFrame(
        filename=_DIRECTORY_PREFIX.sub("", path.strip()),
        function=function.strip() or UNKNOWN_FUNCTION,
        line=int(line),
        column=int(column) if column is not None else None,
    )


TraceRule = tuple[re.Pattern[str], Callable[[re.Match[str]], StackFrame]]

# Порядок важен: от специфичных форматов к общим, побеждает первое совпадение.
# Общие шаблоны совпадают и со строками специфичных форматов.
TRACE_RULES: list[TraceRule] = [
    # Ruby: "from /path/file.rb:123:in `method_name'"
    (
        re.compile(r"from\s+(.+?):(\d+):in\s+[`'](.+?)'"),
        lambda m: _frame(m[1], m[3], m[2]),
    ),
    # Ruby: "/path/file.rb:123:in `method_name'"
    (
        re.compile(r"(.+?):(\d+):in\s+[`'](.+?)'"),
        lambda m: _frame(m[1], m[3], m[2]),
    ),
    # Ruby без метода: "/path/file.rb:123"
    (
        re.compile(r"(.+\.(?:rb|rake|erb)):(\d+)"),
        lambda m: _frame(m[1], UNKNOWN_FUNCTION, m[2]),
    ),
    # JavaScript/TypeScript: "at functionName (file.js:123:45)"
    (
        re.compile(r"at\s+(.+?)\s+\((.+?):(\d+):(\d+)\)"),
        lambda m: _frame(m[2], m[1], m[3], m[4]),
    ),
    # Python: 'File "/path/file.py", line 123, in function_name'
    (
        re.compile(r'File\s+"(.+?)",\s+line\s+(\d+),\s+in\s+(.+)'),
        lambda m: _frame(m[1], m[3], m[2]),
    ),
    # Java: "at com.example.Class.method(File.java:123)"
    (
        re.compile(r"at\s+(.+?)\((.+?):(\d+)\)"),
        lambda m: _frame(m[2], m[1], m[3]),
    ),
    # Общий: "functionName file.ext:123"
    (
        re.compile(r"(\w+)\s+(.+?):(\d+)"),
        lambda m: _frame(m[2], m[1], m[3]),
    ),
]


class TraceParser:
    """Эвристический парсер стектрейсов разных языков."""

    def __init__(self, rules: list[TraceRule] | None = None):
        self.rules = rules if rules is not None else TRACE_RULES

    def parse(self, text: str) -> list[StackFrame]:
        """
        Разобрать стектрейс построчно.

        Нераспознанные строки пропускаются. Пустой список - нормальный
        результат ("не удалось разобрать"), а не ошибка.

        Returns:
            Фреймы в том порядке, в котором они встретились в тексте
        """
        frames = []

        for line in text.splitlines():
            frame = self.parse_line(line)
            if frame:
                frames.append(frame)

        logger.debug(f"[Trace] Parsed {len(frames)} frames")
        return frames

    def parse_line(self, line: str) -> StackFrame | None:
        """Разобрать одну строку первым подходящим правилом."""
        for pattern, extract in self.rules:
            match = pattern.search(line)
            if match:
                return extract(match)
        return None


def parse_stack_trace(text: str) -> list[StackFrame]:
    """Разобрать стектрейс правилами по умолчанию."""
    return TraceParser().parse(text)
