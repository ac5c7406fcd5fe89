"""Главный сервис расследования стектрейсов (фасад)."""

import asyncio
import os
import logging

from .models import (
    FileAnalysis,
    FrameAnalysis,
    FrameStatus,
    StackFrame,
    StackTraceAnalysis,
)
from .config import InvestigationConfig
from .trace_parser import TraceParser
from .file_scanner import FileScanner, load_scan_context
from .source_locator import SourceLocator, read_source_file
from .source_parser import SourceParser
from .context_extractor import relevant_lines, window_around

logger = logging.getLogger(__name__)


class InvestigationService:
    """Сервис для сопоставления стектрейса с кодовой базой."""

    def __init__(self, config: InvestigationConfig | None = None):
        self.config = config if config is not None else InvestigationConfig()

        self.trace_parser = TraceParser()
        self.scanner = FileScanner(self.config)
        self.locator = SourceLocator(self.config)
        self.parser = SourceParser()

    def parse_stack_trace(self, stack_trace: str) -> list[StackFrame]:
        """Разобрать стектрейс во фреймы."""
        return self.trace_parser.parse(stack_trace)

    async def analyze_stack_trace(
        self, stack_trace: str, repo_path: str
    ) -> StackTraceAnalysis:
        """
        Разобрать стектрейс и найти код для первых max_frames фреймов.

        Фреймы анализируются параллельно, результат в исходном порядке.

        Returns:
            StackTraceAnalysis; frames пустой, если стектрейс не разобран
        """
        frames = self.parse_stack_trace(stack_trace)
        if not frames:
            logger.info("[Investigation] Could not parse stack trace")
            return StackTraceAnalysis(frames=(), results=())

        logger.info(f"[Investigation] Parsed {len(frames)} frames")

        selected = frames[: self.config.max_frames]
        tasks = [
            self._analyze_frame_bounded(i, frame, repo_path)
            for i, frame in enumerate(selected)
        ]
        results = await asyncio.gather(*tasks)

        # Сортируем по индексу, чтобы вернуть в правильном порядке
        ordered = tuple(result for _, result in sorted(results, key=lambda r: r[0]))
        self._log_results(ordered)

        return StackTraceAnalysis(frames=tuple(frames), results=ordered)

    async def _analyze_frame_bounded(
        self, index: int, frame: StackFrame, repo_path: str
    ) -> tuple[int, FrameAnalysis]:
        """Проанализировать фрейм в потоке, с лимитом времени если задан."""
        call = asyncio.to_thread(self.analyze_frame, frame, repo_path)

        try:
            if self.config.frame_timeout is None:
                return index, await call
            return index, await asyncio.wait_for(call, self.config.frame_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"[Investigation] Timed out reading {frame.filename}, skipping"
            )
            return index, FrameAnalysis(frame=frame, status=FrameStatus.NOT_FOUND)

    def analyze_frame(self, frame: StackFrame, repo_path: str) -> FrameAnalysis:
        """
        Найти файл фрейма и вырезать окно контекста.

        Returns:
            FrameAnalysis со статусом resolved, not_found или no_context
        """
        located = self.locator.locate(frame, repo_path)
        if located is None:
            return FrameAnalysis(frame=frame, status=FrameStatus.NOT_FOUND)

        path, content = located
        window = window_around(content, frame.line, self.config.context_radius, path)
        if window is None:
            return FrameAnalysis(frame=frame, status=FrameStatus.NO_CONTEXT, path=path)

        return FrameAnalysis(
            frame=frame, status=FrameStatus.RESOLVED, path=path, window=window
        )

    def analyze_codebase(self, repo_path: str) -> list[FileAnalysis]:
        """
        Проанализировать исходники кодовой базы.

        Нечитаемые файлы пропускаются, сканирование продолжается.
        """
        logger.info("[Investigation] Starting codebase analysis...")

        context = load_scan_context(repo_path)
        analyses = []

        for file_path in self.scanner.scan(repo_path, context):
            analysis = self.analyze_file(os.path.join(repo_path, file_path))
            if analysis:
                analyses.append(analysis)
            else:
                logger.warning(f"[Investigation] Skipped unreadable file {file_path}")

        logger.info(f"[Investigation] Analyzed {len(analyses)} files")
        return analyses

    def analyze_file(
        self, path: str, target_line: int | None = None, radius: int | None = None
    ) -> FileAnalysis | None:
        """
        Проанализировать один файл.

        Args:
            path: путь к файлу
            target_line: строка (с 1), вокруг которой собрать relevant_lines
            radius: размер окна, по умолчанию context_radius

        Returns:
            FileAnalysis или None, если файл не читается
        """
        content = read_source_file(path)
        if content is None:
            return None

        lines = content.split("\n")
        parsed = self.parser.parse_file(content)

        relevant = None
        if target_line is not None and 1 <= target_line <= len(lines):
            if radius is None:
                radius = self.config.context_radius
            relevant = relevant_lines(lines, target_line - 1, radius)

        return FileAnalysis(
            path=path,
            content=content,
            line_count=len(lines),
            functions=parsed.functions,
            imports=parsed.imports,
            relevant_lines=relevant,
        )

    def _log_results(self, results: tuple[FrameAnalysis, ...]) -> None:
        """Логировать итоги по фреймам."""
        for result in results:
            logger.info(
                f"[Investigation] {result.frame.filename}:{result.frame.line} "
                f"-> {result.status.value}"
            )
