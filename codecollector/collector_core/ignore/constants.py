"""
Central configuration for ignore file processing
"""

# Name of the per-directory ignore files honoured during a walk
IGNORE_FILENAME = ".gitignore"

# Provenance labels for rules that do not come from an ignore file
USER_CONFIG_SOURCE = "user-config"
BUILTIN_SOURCE = "built-in"

# Rules every run starts with unless defaults are disabled
DEFAULT_IGNORE_PATTERNS = [
    ".git",
    IGNORE_FILENAME,
]

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000
