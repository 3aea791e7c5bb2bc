"""
Configuration settings for the performance metrics engine and its CLI.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from academy_metrics.config.constants import (
    BUCKET_COUNT, DEFAULT_SCHEMA, DEFAULT_GRANULARITY
)

logger = logging.getLogger(__name__)


ENV_PREFIX = "ACADEMY_METRICS_"


@dataclass
class EngineConfig:
    schema: str = DEFAULT_SCHEMA
    bucket_count: int = BUCKET_COUNT
    granularity: str = DEFAULT_GRANULARITY.value

    # Timezone that aware timestamps are converted to before dropping time of day
    timezone: str = "UTC"

    log_level: int = logging.INFO
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config, overriding defaults with ACADEMY_METRICS_* variables."""
        config = cls()

        config.schema = os.getenv(f"{ENV_PREFIX}SCHEMA", config.schema)
        config.granularity = os.getenv(f"{ENV_PREFIX}RANGE", config.granularity)
        config.timezone = os.getenv(f"{ENV_PREFIX}TIMEZONE", config.timezone)
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE", config.log_file)

        bucket_count = os.getenv(f"{ENV_PREFIX}BUCKET_COUNT")
        if bucket_count:
            try:
                config.bucket_count = max(1, int(bucket_count))
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}BUCKET_COUNT={bucket_count!r}")

        level_name = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if level_name:
            level = logging.getLevelName(level_name.upper())
            if isinstance(level, int):
                config.log_level = level

        return config
