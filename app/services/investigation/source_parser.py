"""Лексическое извлечение функций и зависимостей из исходников."""

import logging
import re

from app.constants import LANGUAGE_MAP
from .models import ParsedSource

logger = logging.getLogger(__name__)

# Слова, которые C-подобные шаблоны ловят как "имя функции": if (...) {, return foo(...)
NON_DECLARATION_NAMES = frozenset(
    {
        "if",
        "elsif",
        "else",
        "unless",
        "until",
        "for",
        "foreach",
        "while",
        "switch",
        "case",
        "when",
        "catch",
        "rescue",
        "return",
        "new",
        "throw",
        "do",
        "function",
        "typeof",
        "sizeof",
        "super",
    }
)

# Шаблоны объявлений функций. Применяются к строке без отступов.
# Порядок важен для поиска объемлющей функции: первый совпавший шаблон даёт имя.
DECLARATION_PATTERNS = [
    # Ruby/Python: def name, def self.name, async def name
    re.compile(r"\bdef\s+(?:self\.)?(\w+[!?]?)"),
    # Ruby: name = lambda { / name = proc do
    re.compile(r"(\w+)\s*=\s*(?:lambda|proc)\s*(?:\{|\bdo\b)"),
    # Ruby: name = ->(args)
    re.compile(r"(\w+)\s*=\s*->\s*\("),
    # JavaScript/PHP: function name
    re.compile(r"\bfunction\b\s*\*?\s*(\w+)\s*\("),
    # JavaScript: name: function
    re.compile(r"(\w+)\s*:\s*(?:async\s+)?function\b"),
    # JavaScript/TypeScript: const name = (args) =>
    re.compile(r"\b(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"),
    # Go: func name( / func (r *Recv) name(
    re.compile(r"^func\s+(?:\([^)]*\)\s*)?(\w+)\s*\("),
    # JavaScript/TypeScript: метод класса name(args) {
    re.compile(r"^(?:(?:static|async|get|set)\s+)*(\w+)\s*\([^)]*\)\s*\{"),
    # Java/C#/C/C++: [modifiers] Type name(args) без ";" в конце
    re.compile(
        r"^(?:(?:public|private|protected|internal|static|final|abstract|"
        r"override|virtual|async|synchronized)\s+)*"
        r"(?!(?:return|new|throw|raise|if|elif|else|unless|until|while|when|"
        r"case|for|in|is|with|except|and|or|not|class|struct|interface|enum|"
        r"await|yield|delete|defer|go|echo|"
        r"puts|print|assert)\b)"
        r"[\w<>\[\],.?*&]+\s+\**(\w+)\s*\([^;]*$"
    ),
]

# Шаблоны зависимостей. Ruby первым, потом остальные языки.
IMPORT_PATTERNS = [
    # Ruby
    re.compile(r"\brequire\s+['\"]([^'\"]+)['\"]"),
    re.compile(r"\brequire_relative\s+['\"]([^'\"]+)['\"]"),
    re.compile(r"\bload\s+['\"]([^'\"]+)['\"]"),
    re.compile(r"\binclude\s+([A-Z]\w*(?:::[A-Z]\w*)*)"),
    re.compile(r"\bextend\s+([A-Z]\w*(?:::[A-Z]\w*)*)"),
    re.compile(r"\bgem\s+['\"]([^'\"]+)['\"]"),
    # JavaScript/TypeScript
    re.compile(r"\bimport\s+.*?\s+from\s+['\"]([^'\"]+)['\"]"),
    re.compile(r"\bimport\s+['\"]([^'\"]+)['\"]"),
    re.compile(r"\brequire\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
    # Python
    re.compile(r"^from\s+(\S+)\s+import\b"),
    # Python/Java: import a.b.c; (JS-импорты "from" пропускаем)
    re.compile(r"^import\s+(?!.*\bfrom\s)(?:static\s+)?([\w.]+(?:\.\*)?)"),
    # PHP
    re.compile(r"^use\s+([\w\\]+)\s*;"),
    # C/C++
    re.compile(r"^#\s*include\s+[<\"]([^>\"]+)[>\"]"),
]


def detect_language(filename: str) -> str:
    """Определить метку языка по расширению файла ("" если неизвестно)."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return LANGUAGE_MAP.get(ext, "")


def match_declaration(line: str) -> str | None:
    """Имя функции, если строка похожа на объявление."""
    stripped = line.strip()
    for pattern in DECLARATION_PATTERNS:
        match = pattern.search(stripped)
        if match and match[1] not in NON_DECLARATION_NAMES:
            return match[1]
    return None


class SourceParser:
    """Парсер для извлечения функций и зависимостей по регулярным выражениям."""

    def parse_file(self, content: str) -> ParsedSource:
        """
        Извлечь функции и импорты из содержимого файла.

        Returns:
            ParsedSource с уникальными именами в порядке появления
        """
        return ParsedSource(
            functions=self.extract_functions(content),
            imports=self.extract_imports(content),
        )

    def extract_functions(self, content: str) -> tuple[str, ...]:
        """Извлечь имена объявленных функций."""
        return self._collect(content, DECLARATION_PATTERNS, NON_DECLARATION_NAMES)

    def extract_imports(self, content: str) -> tuple[str, ...]:
        """Извлечь модули и зависимости."""
        return self._collect(content, IMPORT_PATTERNS)

    def _collect(
        self,
        content: str,
        patterns: list[re.Pattern[str]],
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[str, ...]:
        """Собрать все совпадения всех шаблонов по всем строкам без дублей."""
        # dict сохраняет порядок первого появления
        found: dict[str, None] = {}

        for line in content.split("\n"):
            stripped = line.strip()
            for pattern in patterns:
                for match in pattern.finditer(stripped):
                    name = match[1]
                    if name not in excluded:
                        found.setdefault(name, None)

        return tuple(found)
