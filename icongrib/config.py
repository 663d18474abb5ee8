"""
Downloader options, built once at startup and handed to the pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from icongrib.errors import ConfigError

# -------------------------------------------------------------------------
# Defaults
# -------------------------------------------------------------------------

# Base URL for DWD Open Data ICON-EU GRIB
BASE_URL = "https://opendata.dwd.de/weather/nwp/icon-eu/grib/"

DEFAULT_CONCURRENCY = 5
DEFAULT_RETRIES = 5

# -------------------------------------------------------------------------
# Options
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class DownloaderConfig:
    latest: bool = False
    run: Optional[str] = None
    params: List[str] = field(default_factory=list)
    output_dir: Path = Path(".")
    concurrency: int = DEFAULT_CONCURRENCY
    max_retries: int = DEFAULT_RETRIES
    base_url: str = BASE_URL
    verbose: bool = False

    def validate(self) -> "DownloaderConfig":
        """
        Check run selection and numeric limits. Returns self so it can be chained.
        """
        if self.latest and self.run:
            raise ConfigError("Cannot specify both --latest and --run")
        if not self.latest and not self.run:
            raise ConfigError("Either --latest or --run must be specified")
        if self.concurrency < 1:
            raise ConfigError(f"Concurrency must be a positive integer, got {self.concurrency}")
        if self.max_retries < 0:
            raise ConfigError(f"Retries must be non-negative, got {self.max_retries}")
        if not self.base_url.endswith("/"):
            raise ConfigError(f"Base URL must end with '/': {self.base_url}")
        return self

    @property
    def run_label(self) -> Optional[str]:
        """Explicit run label, or None when the latest run is wanted."""
        return None if self.latest else self.run
