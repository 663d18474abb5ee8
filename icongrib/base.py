import logging
import requests
from pathlib import Path
from typing import Tuple, Union

from icongrib.errors import FetchError

logger = logging.getLogger(__name__)

# Listings are small; GRIB payloads can be large
LISTING_TIMEOUT = 30
FILE_TIMEOUT: Tuple[int, int] = (30, 600)
CHUNK_SIZE = 1 << 16


class HttpTransport:
    """
    Thin wrapper over a requests.Session. Every transport problem leaves here as FetchError.
    """

    def __init__(self, session: requests.Session = None):
        self.session = session or requests.Session()
        logger.debug(f"Initialized transport {self.__class__.__name__}")

    def fetch_text(self, url: str) -> str:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=LISTING_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        logger.debug(f"Response status: {response.status_code} ({len(response.text)} bytes)")
        return response.text

    def fetch_to_file(self, url: str, target_path: Union[str, Path]) -> None:
        try:
            with self.session.get(url, stream=True, timeout=FILE_TIMEOUT) as r:
                r.raise_for_status()
                with open(target_path, "wb") as f:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

    def close(self) -> None:
        self.session.close()
