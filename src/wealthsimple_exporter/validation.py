"""
Validation helpers for exporter settings.

Purpose:
- Catch bad configuration before any prompt or network call happens.

Logic flow:
1) load_settings() builds ExporterSettings.
2) validate_settings() inspects it and returns warning strings.
3) app.main() treats any warning as fatal.
"""

from __future__ import annotations

from urllib.parse import urlparse

from .config import ExporterSettings


def validate_settings(settings: ExporterSettings) -> list[str]:
    """
    Validate ExporterSettings and return warnings.

    Outputs:
    - List of warning strings (empty list means no issues detected).
    """

    warnings: list[str] = []

    parsed = urlparse(settings.api_base_url)
    if parsed.scheme != "https" or not parsed.netloc:
        warnings.append(
            f"api_base_url '{settings.api_base_url}' should be an https:// URL."
        )

    if not 0 <= settings.metrics_port <= 65535:
        warnings.append(f"metrics_port {settings.metrics_port} is outside 0-65535.")

    if not settings.metrics_path.startswith("/"):
        warnings.append(f"metrics_path '{settings.metrics_path}' must start with '/'.")

    if settings.poll_interval_seconds <= 0:
        warnings.append("poll_interval_seconds must be > 0.")

    if settings.request_timeout_seconds <= 0:
        warnings.append("request_timeout_seconds must be > 0.")

    if settings.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        warnings.append(f"log_level '{settings.log_level}' is not a standard level name.")

    return warnings
