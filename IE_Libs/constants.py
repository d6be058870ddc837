"""
Constants and configuration values for the image editor.

This module centralizes all constant values, limits, and
wire field names used throughout the editing core.
"""

# History
MAX_HISTORY = 50

# Load limits
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100 MiB
MAX_DIMENSION = 16384
MAX_DECODED_BYTES = MAX_DIMENSION * MAX_DIMENSION * 4

# Supported file formats
SUPPORTED_LOAD_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tiff", ".tif"}
SUPPORTED_EXPORT_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

# Working pixel modes
WORKING_MODES = ("L", "LA", "RGB", "RGBA")

# Preview defaults
DEFAULT_PREVIEW_MAX_WIDTH = 1920
DEFAULT_PREVIEW_MAX_HEIGHT = 1080
DEFAULT_PREVIEW_JPEG_QUALITY = 85
PNG_DATA_URL_PREFIX = "data:image/png;base64,"
JPEG_DATA_URL_PREFIX = "data:image/jpeg;base64,"

# Parallel pixel processing
DEFAULT_CHUNK_ROWS = 256

# Operation wire field names
FIELD_OPERATION_TYPE = "operation_type"
FIELD_PARAMS = "params"
FIELD_TYPE = "type"
FIELD_ID = "id"
FIELD_OPERATION = "operation"
FIELD_TIMESTAMP = "timestamp"

# Operation kinds
OPERATION_FILTER = "Filter"
OPERATION_ADJUSTMENT = "Adjustment"
OPERATION_TRANSFORM = "Transform"
OPERATION_CROP = "Crop"
