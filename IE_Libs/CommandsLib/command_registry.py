"""
Command Registry.

This module maps command names to handler functions for the command
surface. Handlers take the request dictionary and return an output object
with to_dict(). invoke() is the boundary used by the command surface: it
never raises, and reports failures with the structured error payload.

Classes:
    CommandRegistry: Registry for command handlers

Functions:
    create_default_registry: Registry with every editor command bound to a session
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from IE_Libs.errors import StateError, error_payload
from IE_Libs.CommandsLib.command_types import (
    ApplyOperationInput,
    ExportParams,
    HistoryStepInput,
    OpenImageInput,
    PreviewInput,
)
from IE_Libs.CommandsLib.editor_session import EditorSession

logger = logging.getLogger(__name__)

# Type alias for handler function
CommandHandler = Callable[[Dict[str, Any]], Any]


class CommandRegistry:
    """
    Registry for command handlers.

    Example:
        >>> registry = CommandRegistry()
        >>> registry.register("open_image", open_image_handler)
        >>> response = registry.invoke("open_image", {"file_path": "photo.png"})
        >>> response["ok"]
        True
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._handlers: Dict[str, CommandHandler] = {}
        self._descriptions: Dict[str, str] = {}

    def register(self, name: str, handler: CommandHandler, description: str = "") -> None:
        """
        Register a command handler.

        Args:
            name: Unique command name (e.g., "apply_operation")
            handler: Callable accepting the request dict
            description: Human-readable description of the command

        Raises:
            ValueError: If name is empty or handler is not callable
            RuntimeError: If name is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("command name cannot be empty")

        if not callable(handler):
            raise ValueError(f"handler must be callable, got {type(handler)}")

        if name in self._handlers:
            raise RuntimeError(
                f"Command '{name}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._handlers[name] = handler
        self._descriptions[name] = str(description)
        logger.debug(f"Registered handler for command: {name}")

    def unregister(self, name: str) -> bool:
        """
        Unregister a command handler.

        Returns:
            True if unregistered, False if name was not registered
        """
        name = str(name).strip()

        if name in self._handlers:
            del self._handlers[name]
            del self._descriptions[name]
            logger.debug(f"Unregistered handler for command: {name}")
            return True

        return False

    def get_handler(self, name: str) -> CommandHandler:
        """
        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._handlers:
            available = ", ".join(self.list_commands())
            raise KeyError(
                f"No handler registered for command '{name}'. "
                f"Available commands: {available}"
            )

        return self._handlers[name]

    def has_handler(self, name: str) -> bool:
        return str(name).strip() in self._handlers

    def execute(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a command and return the handler's output object.

        Raises:
            KeyError: If name is not registered
            EditorError: Any error raised by the handler
        """
        handler = self.get_handler(name)
        return handler(payload or {})

    def invoke(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a command and wrap the outcome for the command surface.

        Returns:
            {"ok": True, "result": {...}} on success, or
            {"ok": False, "error": {"type": ..., "message": ...}} on failure
        """
        try:
            output = self.execute(name, payload)
        except KeyError as e:
            if not self.has_handler(name):
                logger.warning(f"Rejected unknown command: {name}")
                return {"ok": False, "error": StateError(str(e.args[0])).to_dict()}
            logger.exception(f"Command {name} failed")
            return {"ok": False, "error": error_payload(e)}
        except Exception as e:
            logger.warning(f"Command {name} failed: {e}")
            return {"ok": False, "error": error_payload(e)}

        result = output.to_dict() if hasattr(output, "to_dict") else output
        return {"ok": True, "result": result}

    def list_commands(self) -> List[str]:
        return sorted(self._handlers)

    def get_description(self, name: str) -> str:
        name = str(name).strip()
        if name not in self._descriptions:
            raise KeyError(f"No description for command: {name}")
        return self._descriptions[name]


def create_default_registry(session: EditorSession) -> CommandRegistry:
    """
    Build a registry with every editor command bound to session.

    Registers: open_image, apply_operation, undo, redo, preview,
    export_image, history_state, clear.
    """
    registry = CommandRegistry()

    registry.register(
        "open_image",
        lambda payload: session.open_image(OpenImageInput.from_dict(payload)),
        description="Load an image file and return its preview",
    )
    registry.register(
        "apply_operation",
        lambda payload: session.apply_operation(ApplyOperationInput.from_dict(payload)),
        description="Apply a filter, adjustment, transform or crop",
    )
    registry.register(
        "undo",
        lambda payload: session.undo(HistoryStepInput.from_dict(payload)),
        description="Undo the last operation",
    )
    registry.register(
        "redo",
        lambda payload: session.redo(HistoryStepInput.from_dict(payload)),
        description="Redo the last undone operation",
    )
    registry.register(
        "preview",
        lambda payload: session.preview(PreviewInput.from_dict(payload)),
        description="Preview operations over the original image",
    )
    registry.register(
        "export_image",
        lambda payload: session.export_image(ExportParams.from_dict(payload)),
        description="Export the current image (format from extension)",
    )
    registry.register(
        "history_state",
        lambda payload: session.history_state(),
        description="Report undo/redo availability",
    )
    registry.register(
        "clear",
        lambda payload: session.clear(),
        description="Drop the loaded image and its history",
    )

    logger.info("Registered default editor commands")
    return registry
