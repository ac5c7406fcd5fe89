"""Настройки конфигурации."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Config(BaseSettings):
    """Конфигурация приложения."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Кодовая база (обязательно)
    codebase_path: str

    # Стектрейс: путь к файлу, пусто = читать из stdin
    stack_trace_file: str = Field(default="")

    # Настройки анализа
    context_radius: int = Field(default=3, ge=0)
    max_frames: int = Field(default=5, ge=1)
    max_files: int = Field(default=50, ge=1)
    frame_timeout: float | None = Field(default=None)  # секунды, None = без лимита

    # Папка для отчётов
    artifacts_dir: str = Field(default="__artifacts__")
