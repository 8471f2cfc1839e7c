"""Application configuration.

AppConfig is a frozen dataclass: set once when the app is created, then read
by the route compiler and the request handler.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    reload: bool = False

    # Path templates
    placeholder_pattern: str = r":(\w+)(\?)?"  # `:name` and `:name?`
    default_pattern: str = r"\w+"  # Used when a variable has no assertion

    # Methods
    head_implies_get: bool = True  # A GET route also answers HEAD

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Logging
    log_level: str = "info"
