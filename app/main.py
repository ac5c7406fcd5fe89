"""Пайплайн расследования ошибки по стектрейсу."""

import asyncio
import logging
import sys
from pathlib import Path
from datetime import datetime

from app.config import Config
from app.services.investigation import InvestigationConfig, InvestigationService
from app.services.report_service import ReportService

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


class Pipeline:
    """Пайплайн: стектрейс -> фреймы -> код -> отчёт."""

    def __init__(self, config: Config):
        self.config = config

        codebase = Path(config.codebase_path)
        if not codebase.is_dir():
            raise FileNotFoundError(f"Codebase path does not exist: {codebase}")

        self.investigation_service = InvestigationService(
            InvestigationConfig.from_settings(config)
        )
        self.report_service = ReportService()

        # Папка для отчётов
        self.artifacts_dir = Path(config.artifacts_dir)
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    async def run(self) -> Path:
        """Запустить пайплайн и вернуть путь к отчёту."""
        logger.info("╔═══════════════════════════════════════════════════════════╗")
        logger.info("║          ISSUE INVESTIGATION PIPELINE                     ║")
        logger.info("╚═══════════════════════════════════════════════════════════╝")

        stack_trace = self.read_stack_trace()

        if stack_trace.strip():
            report = await self.investigate(stack_trace)
        else:
            logger.info("No stack trace given, summarizing codebase")
            report = self.summarize_codebase()

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        report_path = self._save_file(f"{timestamp}.investigation.md", report)

        logger.info(f"\n✓ Report saved to {report_path}")
        return report_path

    def read_stack_trace(self) -> str:
        """Прочитать стектрейс из файла или stdin."""
        if self.config.stack_trace_file:
            return Path(self.config.stack_trace_file).read_text(encoding="utf-8")

        if sys.stdin.isatty():
            return ""
        return sys.stdin.read()

    async def investigate(self, stack_trace: str) -> str:
        """
        Шаг 1-3: Разобрать стектрейс, найти код фреймов, отформатировать.

        Returns:
            markdown-отчёт
        """
        analysis = await self.investigation_service.analyze_stack_trace(
            stack_trace, self.config.codebase_path
        )
        logger.info(f"[1/3] Stack trace parsed: {len(analysis.frames)} frames")

        resolved = sum(1 for r in analysis.results if r.window is not None)
        logger.info(
            f"[2/3] Frames analyzed: {len(analysis.results)}, with context: {resolved}"
        )

        report = "# 🐛 Issue Investigation Report\n\n"
        report += self.report_service.format_stack_trace_analysis(analysis)
        logger.info("[3/3] Report formatted")

        return report

    def summarize_codebase(self) -> str:
        """Сводка по исходникам кодовой базы."""
        analyses = self.investigation_service.analyze_codebase(
            self.config.codebase_path
        )
        return self.report_service.format_codebase_summary(
            analyses, self.config.codebase_path
        )

    def _save_file(self, filename: str, content: str) -> Path:
        """Сохранить содержимое в файл в папке отчётов."""
        file_path = self.artifacts_dir / filename
        file_path.write_text(content, encoding="utf-8")
        return file_path


if __name__ == "__main__":
    config = Config.model_validate(
        {}
    )  # https://github.com/pydantic/pydantic/issues/3753
    pipeline = Pipeline(config)
    asyncio.run(pipeline.run())
