"""Сервис форматирования результатов расследования в markdown."""

import logging
import os

from app.services.investigation import (
    FileAnalysis,
    FrameAnalysis,
    FrameStatus,
    LineRole,
    StackTraceAnalysis,
    UNKNOWN_FUNCTION,
)
from app.services.investigation.source_parser import detect_language

logger = logging.getLogger(__name__)


# Константы для форматирования
UNPARSED_MESSAGE = (
    "❌ Could not parse stack trace. Please ensure it's in a valid format.\n"
)
MAX_LISTED_FUNCTIONS = 10
MAX_LISTED_IMPORTS = 5


class ReportService:
    """Сервис для превращения результатов анализа в markdown-отчёт."""

    def format_stack_trace_analysis(self, analysis: StackTraceAnalysis) -> str:
        """
        Форматировать анализ стектрейса.

        Если стектрейс не разобран, возвращается короткое сообщение.

        Returns:
            Markdown: список фреймов и контекст кода по каждому
        """
        if not analysis.parsed:
            return UNPARSED_MESSAGE

        report = "## 🔍 Stack Trace Analysis\n\n"
        report += "**Parsed Stack Trace:**\n"

        for i, frame in enumerate(analysis.frames, 1):
            function = frame.function if frame.function != UNKNOWN_FUNCTION else "<anonymous>"
            report += f"{i}. `{function}`\n"
            report += f"   📁 {frame.filename}:{frame.line}\n"

        report += "\n**Code Context:**\n\n"
        for result in analysis.results:
            report += self._format_frame(result) + "\n"

        return report

    def _format_frame(self, result: FrameAnalysis) -> str:
        """Форматировать контекст одного фрейма."""
        frame = result.frame

        if result.status == FrameStatus.NOT_FOUND:
            return (
                f"❓ **File not found:** `{frame.filename}` - May be from external "
                "library or different path structure.\n"
            )

        if result.status == FrameStatus.NO_CONTEXT or result.window is None:
            return (
                f"⚠️ **No context available:** `{frame.filename}` has no "
                f"line {frame.line}.\n"
            )

        window = result.window
        text = f"### 📄 `{frame.filename}` (Line {frame.line})\n\n"
        text += "```" + detect_language(frame.filename) + "\n"

        for line in window.lines:
            marker = "→ " if line.role == LineRole.TARGET else "  "
            text += f"{marker}{line.line_number}: {line.content}\n"

        text += "```\n"

        if window.containing_function != UNKNOWN_FUNCTION:
            text += f"🔧 **Function:** `{window.containing_function}`\n"

        return text

    def format_codebase_summary(
        self, analyses: list[FileAnalysis], repo_path: str = ""
    ) -> str:
        """Форматировать сводку по проанализированным файлам."""
        if not analyses:
            return "*No relevant files found in the current codebase.*\n"

        report = "## 📁 Codebase Summary\n\n"
        for analysis in analyses:
            report += self._format_file(analysis, repo_path)

        return report

    def _format_file(self, analysis: FileAnalysis, repo_path: str) -> str:
        """Форматировать сводку по одному файлу."""
        path = os.path.relpath(analysis.path, repo_path) if repo_path else analysis.path

        text = f"### 📄 `{path}`\n\n"
        text += f"- **Lines:** {analysis.line_count}\n"

        if analysis.functions:
            text += "- **Functions:** " + self._truncated_list(
                analysis.functions, MAX_LISTED_FUNCTIONS
            )
        if analysis.imports:
            text += "- **Key Imports:** " + self._truncated_list(
                analysis.imports, MAX_LISTED_IMPORTS
            )

        return text + "\n"

    def _truncated_list(self, items: tuple[str, ...], limit: int) -> str:
        suffix = "..." if len(items) > limit else ""
        return ", ".join(items[:limit]) + suffix + "\n"
