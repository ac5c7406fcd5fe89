"""Общие хелперы тестов: временная кодовая база."""

import tempfile
from pathlib import Path


class CodebaseFixture:
    """Временная директория с файлами кодовой базы."""

    def __init__(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name

    def write(self, rel_path: str, content: str | bytes) -> str:
        path = Path(self.root) / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    def cleanup(self) -> None:
        self._tmp.cleanup()


def numbered_lines(count: int, prefix: str = "line") -> str:
    return "\n".join(f"{prefix} {i}" for i in range(1, count + 1))
