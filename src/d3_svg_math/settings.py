import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library defaults pulled from ``D3_SVG_MATH_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="D3_SVG_MATH_", extra="ignore")

    # Golden-file verification
    golden_tolerance: float = Field(default=1e-6, description="Default comparison tolerance")
    golden_dir: Optional[Path] = Field(default=None, description="Directory holding golden JSON files")

    # Path serialisation
    path_digits: Optional[int] = Field(
        default=None, description="Fixed decimal digits for path data (None = full precision)"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")


@lru_cache(maxsize=1)
def get_settings():
    return Settings()


def configure_logging(settings=None):
    """Route structlog through stdlib logging at the configured level."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("d3_svg_math").setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger("d3_svg_math")
