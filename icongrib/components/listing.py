"""
Directory-index parsing for the DWD Open Data tree.

Two page shapes are handled:
  - the run level, an Apache-style listing where each anchor row is followed
    by its modification time, e.g.
        <a href="00/">00/</a>                      12-Mar-2025 02:39    -
  - the parameter and file levels, where only the anchor targets matter.
"""

import datetime as dt
import logging
import re
from typing import Callable, Iterator, List

from bs4 import BeautifulSoup

from icongrib.models import RunEntry

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Constants
# -------------------------------------------------------------------------

RUN_ROW_RE = re.compile(r'<a href="(\d\d)/.*?(\d\d-\w+-\d{4} \d\d:\d\d)')
LISTING_TIME_FORMAT = "%d-%b-%Y %H:%M"

PARENT_LINK = "../"
COMPRESSED_SUFFIX = ".bz2"
GRIB_SUFFIX = ".grib2" + COMPRESSED_SUFFIX

# -------------------------------------------------------------------------
# Predicates
# -------------------------------------------------------------------------

def is_directory_link(href: str) -> bool:
    return href.endswith("/")


def is_compressed_grib(href: str) -> bool:
    return href.endswith(GRIB_SUFFIX)

# -------------------------------------------------------------------------
# Parsers
# -------------------------------------------------------------------------

def parse_run_listing(content: str, base_url: str) -> Iterator[RunEntry]:
    """
    Yield one RunEntry per run row whose timestamp parses.
    Rows that do not match, or carry a bad timestamp, are skipped.
    """
    for match in RUN_ROW_RE.finditer(content):
        label, stamp = match.group(1), match.group(2)
        try:
            published_at = dt.datetime.strptime(stamp, LISTING_TIME_FORMAT)
        except ValueError as e:
            logger.warning(f"Couldn't parse timestamp '{stamp}' for run {label}: {e}")
            continue
        logger.debug(f"Found run: {label}, timestamp: {stamp}")
        yield RunEntry(label=label, url=f"{base_url}{label}/", published_at=published_at)


def extract_links(content: str, predicate: Callable[[str], bool]) -> Iterator[str]:
    """
    Yield the href of every anchor in the document that satisfies predicate.
    The parent-directory link is never yielded.
    """
    soup = BeautifulSoup(content, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href or href == PARENT_LINK:
            continue
        if predicate(href):
            yield href


def list_all_links(content: str) -> List[str]:
    """Every non-parent link on the page, used by the listing debug mode."""
    return list(extract_links(content, lambda href: True))
