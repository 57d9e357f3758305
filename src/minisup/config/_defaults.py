"""Default configuration values.

These values are used when no other configuration source provides them.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "command": "",
    "type": "simple",
    "delay": 30000,
    "output_limit": 0,
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
}

DEFAULT_CONFIG_FILENAME = "minisup.toml"
