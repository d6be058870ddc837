"""
IE_Libs - Image Editor Library Modules

This package contains the editing core of the image editor,
organized into specialized sub-packages:

- ImageEditingLib: Pixel operations (filters, adjustments, transforms, crop)
- StateLib: Undo/redo history, editor state snapshots and the worker pool
- OutputLib: Preview encoding and file export
- CommandsLib: Command handlers marshaling requests to the editor state
"""

__version__ = "0.1.0"
