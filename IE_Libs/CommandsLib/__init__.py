"""
CommandsLib - Command surface marshaling

This module parses command requests, runs them against an editor
session and renders results or structured errors.
"""

from IE_Libs.CommandsLib.command_types import (
    ApplyOperationInput,
    ApplyOperationOutput,
    ClearOutput,
    ExportParams,
    ExportResult,
    HistoryStepInput,
    HistoryStepOutput,
    OpenImageInput,
    OpenImageOutput,
    PreviewInput,
    PreviewOutput,
)
from IE_Libs.CommandsLib.editor_session import EditorSession
from IE_Libs.CommandsLib.command_registry import CommandRegistry, create_default_registry

__all__ = [
    "ApplyOperationInput",
    "ApplyOperationOutput",
    "ClearOutput",
    "ExportParams",
    "ExportResult",
    "HistoryStepInput",
    "HistoryStepOutput",
    "OpenImageInput",
    "OpenImageOutput",
    "PreviewInput",
    "PreviewOutput",
    "EditorSession",
    "CommandRegistry",
    "create_default_registry",
]
