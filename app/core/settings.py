"""
Offline transaction toolkit settings.

Typed settings layer that serves as the single source of truth for tool
configuration. Environment variables (optionally from a `.env` file) are
validated at startup to catch misconfigurations early.

Usage:
    from app.core.settings import settings

    timeout = settings.HTTP_TIMEOUT_SEC
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class SignerType(Enum):
    """Signer backend types."""

    ENV_PRIVATE_KEY = "env_private_key"
    KEYSTORE = "keystore"


QR_ERROR_LEVELS = ("L", "M", "Q", "H")
LOG_LEVELS = ("debug", "info", "warning", "error")


class SettingsValidationError(Exception):
    """Raised when settings validation fails."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid configuration for {field}={value!r}: {message}")


def _parse_int(value: str | None, default: int | None = None) -> int | None:
    """Parse an integer from environment variable."""
    if value is None or value.strip() == "":
        return default
    try:
        return int(value.strip(), 0)  # Support hex with 0x prefix
    except ValueError:
        return default


def _parse_float(value: str | None, default: float | None = None) -> float | None:
    """Parse a float from environment variable."""
    if value is None or value.strip() == "":
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_version_from_pyproject() -> str:
    """Extract version from pyproject.toml."""
    try:
        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        version: str = str(data.get("project", {}).get("version", "0.0.0"))
        return version
    except (OSError, tomllib.TOMLDecodeError):
        return "0.0.0"


@dataclass
class Settings:
    """
    Unified settings class with validation.

    All configuration is loaded and validated at instantiation time.
    """

    # Project metadata (read from pyproject.toml)
    PROJECT_NAME: str = "offline-tx"
    VERSION: str = field(default_factory=_get_version_from_pyproject)

    # Observability
    TXTOOL_LOG_LEVEL: str = field(default_factory=lambda: os.getenv("TXTOOL_LOG_LEVEL", "info").strip().lower())
    TXTOOL_SERVICE_NAME: str = field(default_factory=lambda: os.getenv("TXTOOL_SERVICE_NAME", "offline-tx").strip())

    # Broadcast
    HTTP_TIMEOUT_SEC: float = field(default_factory=lambda: _parse_float(os.getenv("HTTP_TIMEOUT_SEC"), 30.0) or 30.0)
    RPC_URL: str | None = field(default_factory=lambda: _optional(os.getenv("RPC_URL")))

    # Signer settings
    SIGNER_TYPE: SignerType = field(
        default_factory=lambda: SignerType(os.getenv("SIGNER_TYPE", "env_private_key").strip().lower())
        if os.getenv("SIGNER_TYPE", "env_private_key").strip().lower() in [e.value for e in SignerType]
        else SignerType.ENV_PRIVATE_KEY
    )
    PRIVATE_KEY: str | None = field(default_factory=lambda: _optional(os.getenv("PRIVATE_KEY")))
    KEYSTORE_PATH: str | None = field(default_factory=lambda: _optional(os.getenv("KEYSTORE_PATH")))
    KEYSTORE_PASSWORD: str | None = field(default_factory=lambda: os.getenv("KEYSTORE_PASSWORD"))

    # QR rendering
    QR_ERROR_CORRECTION: str = field(default_factory=lambda: os.getenv("QR_ERROR_CORRECTION", "Q").strip().upper())
    QR_BOX_SIZE: int = field(default_factory=lambda: _parse_int(os.getenv("QR_BOX_SIZE"), 12) or 12)
    QR_BORDER: int = field(default_factory=lambda: _parse_int(os.getenv("QR_BORDER"), 6) or 6)
    QR_UNSIGNED_PNG: str = field(default_factory=lambda: os.getenv("QR_UNSIGNED_PNG", "unsigned_qr.png").strip())
    QR_SIGNED_PNG: str = field(default_factory=lambda: os.getenv("QR_SIGNED_PNG", "signed_qr.png").strip())

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        self._validate()

    def _validate(self) -> None:
        errors: list[str] = []

        if self.TXTOOL_LOG_LEVEL not in LOG_LEVELS:
            errors.append(f"TXTOOL_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.TXTOOL_LOG_LEVEL!r}")

        if self.HTTP_TIMEOUT_SEC <= 0:
            errors.append(f"HTTP_TIMEOUT_SEC must be > 0, got {self.HTTP_TIMEOUT_SEC}")

        if self.QR_ERROR_CORRECTION not in QR_ERROR_LEVELS:
            errors.append(f"QR_ERROR_CORRECTION must be one of {', '.join(QR_ERROR_LEVELS)}, got {self.QR_ERROR_CORRECTION!r}")

        if self.QR_BOX_SIZE < 1 or self.QR_BORDER < 0:
            errors.append("QR_BOX_SIZE must be >= 1 and QR_BORDER >= 0")

        if self.RPC_URL and not self.RPC_URL.startswith(("http://", "https://")):
            errors.append(f"RPC_URL must be an http(s) URL, got {self.RPC_URL!r}")

        if errors:
            raise SettingsValidationError("MULTIPLE", None, "; ".join(errors))

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary (redacting secrets)."""
        result: dict[str, Any] = {}
        for key in dir(self):
            if key.startswith("_") or key.isupper() is False:
                continue
            value = getattr(self, key)
            # Redact sensitive values
            if any(s in key.upper() for s in ["SECRET", "PASSWORD", "KEY", "TOKEN"]):
                result[key] = "***REDACTED***" if value else None
            elif isinstance(value, Enum):
                result[key] = value.value
            else:
                result[key] = value
        return result


# Global settings instance
settings = Settings()
