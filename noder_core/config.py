"""
Configuration for Noder Core
"""
import logging
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _parse_origins(raw: str) -> List[str]:
    """Split a comma separated origin list, dropping blanks"""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Config:
    """Configuration class for Noder Core"""

    # Debug mode (set NODER_CORE_DEBUG=true to enable)
    DEBUG: bool = os.getenv("NODER_CORE_DEBUG", "").lower() in ("true", "1", "yes")

    # Explicit log level name (DEBUG, INFO, WARNING, ...); overrides DEBUG when set
    LOG_LEVEL: str = os.getenv("NODER_CORE_LOG_LEVEL", "").strip().upper()

    # API server configuration
    API_HOST: str = os.getenv("NODER_CORE_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("NODER_CORE_PORT", "7780"))
    CORS_ORIGINS: List[str] = _parse_origins(os.getenv("NODER_CORE_CORS_ORIGINS", "*"))

    # Execution configuration
    # Upper bound on nodes running at once inside a layer (0 = one task per node)
    MAX_CONCURRENCY: int = int(os.getenv("NODER_CORE_MAX_CONCURRENCY", "0"))

    # Directory the CLI resolves relative workflow file names against
    WORKFLOWS_DIR: str = os.getenv(
        "NODER_CORE_WORKFLOWS_DIR",
        str(Path.home() / ".noder-core" / "workflows")
    )

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration"""
        if cls.MAX_CONCURRENCY < 0:
            print("[CONFIG] Error: NODER_CORE_MAX_CONCURRENCY must be 0 or a positive integer")
            return False
        if cls.LOG_LEVEL and not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            print(f"[CONFIG] Error: unknown NODER_CORE_LOG_LEVEL: {cls.LOG_LEVEL}")
            return False
        if not 0 < cls.API_PORT < 65536:
            print(f"[CONFIG] Error: NODER_CORE_PORT out of range: {cls.API_PORT}")
            return False
        return True

    @classmethod
    def get_max_concurrency(cls) -> int:
        """Concurrency bound for layer execution, 0 meaning unbounded"""
        return max(cls.MAX_CONCURRENCY, 0)
