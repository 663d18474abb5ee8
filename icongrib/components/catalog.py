"""
Catalog resolution: runs -> parameters -> files.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from icongrib.components.listing import (
    extract_links,
    is_compressed_grib,
    is_directory_link,
    parse_run_listing,
)
from icongrib.errors import NotFoundError, ParseError
from icongrib.models import ParameterEntry, RunEntry

logger = logging.getLogger(__name__)


class CatalogResolver:
    def __init__(self, transport, base_url: str):
        self.transport = transport
        self.base_url = base_url

    # ---------------------------------------------------------------------
    # Runs
    # ---------------------------------------------------------------------

    def list_runs(self) -> List[RunEntry]:
        logger.info(f"Fetching available model runs from: {self.base_url}")
        content = self.transport.fetch_text(self.base_url)

        runs = list(parse_run_listing(content, self.base_url))
        if not runs:
            raise ParseError(f"No model runs found at {self.base_url}")

        logger.info(f"Found {len(runs)} model runs")
        return runs

    @staticmethod
    def select_run(runs: Sequence[RunEntry], run_label: Optional[str] = None) -> RunEntry:
        """
        Pick a run. With no label the newest run by listing timestamp wins;
        on a tie the first one seen is kept.
        """
        if not runs:
            raise NotFoundError("No model runs to select from", [])

        if run_label is None:
            selected = max(runs, key=lambda r: r.published_at)
            logger.info(
                f"Latest model run: {selected.label} "
                f"(timestamp: {selected.published_at:%Y-%m-%d %H:%M:%S})"
            )
            return selected

        for run in runs:
            if run.label == run_label:
                logger.info(f"Selected model run: {run.label}")
                return run
        raise NotFoundError(f"Model run {run_label} not found", [r.label for r in runs])

    # ---------------------------------------------------------------------
    # Parameters
    # ---------------------------------------------------------------------

    def list_parameters(self, run: RunEntry) -> List[ParameterEntry]:
        content = self.transport.fetch_text(run.url)
        params = [
            ParameterEntry(name=href.rstrip("/"), url=run.url + href)
            for href in extract_links(content, is_directory_link)
        ]
        if not params:
            raise ParseError(f"No parameters found for model run {run.label}")

        logger.info(f"Found {len(params)} parameters for run {run.label}")
        return params

    @staticmethod
    def resolve_parameter_set(
        requested: Optional[Sequence[str]],
        available: Sequence[ParameterEntry],
    ) -> Tuple[List[ParameterEntry], List[str]]:
        """
        Match requested names against the available parameters.

        Returns (selected, unmatched). Selected keeps the requested order;
        names with no match are warned about and returned in unmatched.
        Raises NotFoundError only when nothing at all was selected.
        """
        if not requested:
            selected = list(available)
            unmatched: List[str] = []
            logger.info(f"Downloading all {len(selected)} parameters")
        else:
            by_name = {p.name: p for p in available}
            selected, unmatched = [], []
            for name in requested:
                if name in by_name:
                    selected.append(by_name[name])
                else:
                    logger.warning(f"Parameter {name} not found and will be skipped")
                    unmatched.append(name)

        if not selected:
            raise NotFoundError("No valid parameters to download", [p.name for p in available])
        return selected, unmatched

    # ---------------------------------------------------------------------
    # Files
    # ---------------------------------------------------------------------

    def list_files(self, parameter: ParameterEntry) -> List[str]:
        content = self.transport.fetch_text(parameter.url)
        return sorted(extract_links(content, is_compressed_grib))
