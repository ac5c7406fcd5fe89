"""Сопоставление стектрейсов с кодовой базой."""

from .config import InvestigationConfig
from .models import (
    ContextWindow,
    FileAnalysis,
    FrameAnalysis,
    FrameStatus,
    LineRole,
    RelevantLine,
    StackFrame,
    StackTraceAnalysis,
    UNKNOWN_FUNCTION,
)
from .service import InvestigationService
from .trace_parser import TraceParser, parse_stack_trace

__all__ = [
    "ContextWindow",
    "FileAnalysis",
    "FrameAnalysis",
    "FrameStatus",
    "InvestigationConfig",
    "InvestigationService",
    "LineRole",
    "RelevantLine",
    "StackFrame",
    "StackTraceAnalysis",
    "TraceParser",
    "UNKNOWN_FUNCTION",
    "parse_stack_trace",
]
