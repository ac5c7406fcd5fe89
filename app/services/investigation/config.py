"""Конфигурация для расследования стектрейсов."""

from dataclasses import dataclass

from app.constants import PRIMARY_EXTENSIONS, SECONDARY_EXTENSIONS


@dataclass
class InvestigationConfig:
    """Конфигурация анализа стектрейса и кодовой базы."""

    # Группы расширений в порядке приоритета: сначала Ruby, потом остальное
    extension_groups: tuple[tuple[str, ...], ...] = (
        tuple(f".{ext}" for ext in PRIMARY_EXTENSIONS),
        tuple(f".{ext}" for ext in SECONDARY_EXTENSIONS),
    )

    # Служебные директории, исключаемые на любой глубине
    excluded_dirs: frozenset[str] = frozenset(
        {"node_modules", "dist", "build", ".git", "vendor", "tmp"}
    )

    # Куда пробуем подставить имя файла из фрейма (по порядку)
    resolution_prefixes: tuple[str, ...] = ("", "src", "app")

    # Количество строк контекста вокруг целевой строки
    context_radius: int = 3

    # Сколько фреймов анализировать в одном стектрейсе
    max_frames: int = 5

    # Сколько файлов анализировать при сканировании кодовой базы
    max_files: int = 50

    # Лимит времени на анализ одного фрейма (секунды), None = без лимита
    frame_timeout: float | None = None

    @classmethod
    def from_settings(cls, config) -> "InvestigationConfig":
        """Собрать конфигурацию из настроек приложения."""
        return cls(
            context_radius=config.context_radius,
            max_frames=config.max_frames,
            max_files=config.max_files,
            frame_timeout=config.frame_timeout,
        )
