"""Извлечение окна контекста вокруг строки стектрейса."""

from .models import ContextWindow, LineRole, RelevantLine, UNKNOWN_FUNCTION
from .source_parser import match_declaration


def window_around(
    content: str, target_line: int, radius: int, path: str = ""
) -> ContextWindow | None:
    """
    Вырезать окно строк вокруг целевой строки.

    Args:
        content: содержимое файла
        target_line: номер строки (с 1)
        radius: сколько строк брать до и после
        path: путь к файлу, для отчёта

    Returns:
        ContextWindow или None, если строки нет в файле
    """
    lines = content.split("\n")
    target = target_line - 1

    if target < 0 or target >= len(lines):
        return None

    return ContextWindow(
        path=path,
        target_line=target_line,
        lines=relevant_lines(lines, target, radius),
        containing_function=find_containing_function(lines, target),
    )


def relevant_lines(lines: list[str], target: int, radius: int) -> tuple[RelevantLine, ...]:
    """Строки окна с ролями; target - индекс с 0. У границ файла окно просто короче."""
    start = max(0, target - radius)
    end = min(len(lines), target + radius + 1)

    return tuple(
        RelevantLine(line_number=i + 1, content=lines[i], role=_role(i, target))
        for i in range(start, end)
    )


def _role(index: int, target: int) -> LineRole:
    if index < target:
        return LineRole.BEFORE
    if index == target:
        return LineRole.TARGET
    return LineRole.AFTER


def find_containing_function(lines: list[str], target: int) -> str:
    """
    Найти функцию, в которой находится строка.

    Идём от целевой строки вверх до начала файла, первое объявление
    и есть объемлющая функция.
    """
    for i in range(min(target, len(lines) - 1), -1, -1):
        name = match_declaration(lines[i])
        if name:
            return name

    return UNKNOWN_FUNCTION
