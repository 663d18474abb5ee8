"""
Fetch one GRIB file, decompress it from bz2 and store it under the run directory.
"""

import bz2
import logging
import shutil
import time
from pathlib import Path
from typing import Callable, Optional, Union

from icongrib.components.listing import COMPRESSED_SUFFIX
from icongrib.errors import FetchError, RetrievalExhausted
from icongrib.models import ParameterEntry

logger = logging.getLogger(__name__)

TEMP_SUFFIX = COMPRESSED_SUFFIX + ".tmp"

SKIPPED = "skipped"
DOWNLOADED = "downloaded"


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


class RetrievalWorker:
    def __init__(
        self,
        transport,
        output_dir: Union[str, Path],
        max_retries: int = 5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.output_dir = Path(output_dir)
        self.max_retries = max_retries
        self.sleep = sleep

    @staticmethod
    def destination_name(parameter: ParameterEntry, filename: str) -> str:
        # e.g. t_2m_icon-eu_europe_regular-lat-lon_single-level_2023030612_000_T_2M.grib2
        name = f"{parameter.name}_{filename}"
        if name.endswith(COMPRESSED_SUFFIX):
            name = name[: -len(COMPRESSED_SUFFIX)]
        return name

    def destination_path(self, parameter: ParameterEntry, run_label: str, filename: str) -> Path:
        return self.output_dir / run_label / self.destination_name(parameter, filename)

    def retrieve(self, parameter: ParameterEntry, run_label: str, filename: str) -> str:
        """
        Download and decompress one file unless a non-empty copy already exists.

        Returns SKIPPED or DOWNLOADED; raises RetrievalExhausted once every
        attempt has failed.
        """
        dest = self.destination_path(parameter, run_label, filename)

        if dest.exists() and dest.stat().st_size > 0:
            logger.debug(f"Skipping existing file: {dest}")
            return SKIPPED

        dest.parent.mkdir(parents=True, exist_ok=True)
        url = parameter.url + filename
        self._download_and_uncompress(url, dest)
        logger.debug(f"Downloaded and uncompressed: {dest}")
        return DOWNLOADED

    def _download_and_uncompress(self, url: str, dest: Path) -> None:
        temp_path = dest.with_name(dest.name + TEMP_SUFFIX)
        last_error: Optional[BaseException] = None
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            if attempt > 0:
                logger.debug(f"Retry attempt {attempt}/{self.max_retries} for {url}")
                self.sleep(attempt * attempt)

            try:
                self.transport.fetch_to_file(url, temp_path)
            except (FetchError, OSError) as e:
                last_error = e
                logger.debug(f"Download attempt {attempt + 1} failed: {e}")
                _remove(temp_path)
                continue

            try:
                with bz2.open(temp_path, "rb") as src, open(dest, "wb") as out:
                    shutil.copyfileobj(src, out)
            except (OSError, EOFError, ValueError) as e:
                last_error = e
                logger.debug(f"Decompression failed for {url}: {e}")
                _remove(temp_path)
                _remove(dest)
                continue

            _remove(temp_path)
            return

        raise RetrievalExhausted(url, attempts, last_error) from last_error
