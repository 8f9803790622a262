"""Configuration management."""


class Config:
    """Configuration management."""

    # Storage settings
    DEFAULT_PATH = 'data.db'  # Bucket file used by the CLI when --path is omitted
    FSYNC_WRITES = True  # fsync appends and rewrite output before returning
    REWRITE_SUFFIX = '.rewrite'  # Suffix for temporary files created during a rewrite

    # Diagnostics
    VERBOSE = False  # Print rewrite statistics

    # CLI settings
    CLI_LIST_LIMIT = 10  # Default limit for list/listnext/findnext/pop
