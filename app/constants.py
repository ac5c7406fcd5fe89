"""Константы языков и расширений файлов."""

# Расширение -> метка языка для блоков кода в отчёте.
# Порядок важен: сначала основной язык (Ruby), потом остальные.
LANGUAGE_MAP = {
    "rb": "ruby",
    "erb": "erb",
    "rake": "ruby",
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "py": "python",
    "java": "java",
    "go": "go",
    "php": "php",
    "cs": "csharp",
    "cpp": "cpp",
    "c": "c",
    "h": "c",
}

PRIMARY_EXTENSIONS = ("rb", "erb", "rake")

SECONDARY_EXTENSIONS = tuple(ext for ext in LANGUAGE_MAP if ext not in PRIMARY_EXTENSIONS)
