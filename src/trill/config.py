"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. It is handed explicitly to the pipeline; nothing
looks the active app up from global state.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, secret_key="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Security — signs the UI state token sent to the client
    secret_key: str = ""

    # Templates
    template_dir: str | Path = "templates"
    pages_prefix: str = "dynamic"  # Dynamic pages live in <template_dir>/<pages_prefix>/
    layout: str = "page.html"
    autoescape: bool = True

    # Static files
    static_dir: str | Path | None = "static"
    static_url: str = "/"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB
