"""
End-to-end pipeline: resolve the run and parameters, then fetch every
parameter's files under a bounded number of concurrent tasks.
"""

import concurrent.futures
import logging
import threading
import time
from typing import Callable, Optional

from icongrib.base import HttpTransport
from icongrib.components.catalog import CatalogResolver
from icongrib.components.retrieval import DOWNLOADED, RetrievalWorker
from icongrib.config import DownloaderConfig
from icongrib.errors import FetchError, ParseError, RetrievalExhausted
from icongrib.models import DownloadSummary, ParameterEntry, ParameterResult

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(
        self,
        config: DownloaderConfig,
        transport=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.transport = transport if transport is not None else HttpTransport()
        self.catalog = CatalogResolver(self.transport, config.base_url)
        self.worker = RetrievalWorker(
            self.transport, config.output_dir, max_retries=config.max_retries, sleep=sleep
        )

    def run(self) -> DownloadSummary:
        """
        Run the whole pipeline. Catalog errors propagate before any download
        starts; per-parameter failures are collected into the summary.
        """
        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        runs = self.catalog.list_runs()
        run = self.catalog.select_run(runs, self.config.run_label)

        available = self.catalog.list_parameters(run)
        selected, unmatched = self.catalog.resolve_parameter_set(self.config.params, available)

        summary = DownloadSummary(run=run, unmatched=unmatched)
        gate = threading.BoundedSemaphore(self.config.concurrency)

        def task(param: ParameterEntry) -> ParameterResult:
            try:
                return self.process_parameter(param, run.label)
            finally:
                gate.release()

        futures = []
        # The gate, not the pool size, bounds how many parameters run at once
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(selected)) as executor:
            for param in selected:
                gate.acquire()
                futures.append(executor.submit(task, param))

            # Futures stay in submission order so the summary follows the requested order
            for param, future in zip(selected, futures):
                try:
                    summary.results.append(future.result())
                except Exception as e:
                    logger.exception(f"Unexpected error in task for parameter {param.name}")
                    summary.results.append(ParameterResult(name=param.name, error=str(e)))

        self._report(summary)
        return summary

    def process_parameter(self, param: ParameterEntry, run_label: str) -> ParameterResult:
        """Fetch one parameter's files one after another."""
        result = ParameterResult(name=param.name)
        logger.debug(f"Downloading parameter: {param.name}")

        try:
            files = self.catalog.list_files(param)
            if not files:
                raise ParseError(f"No GRIB files found for parameter {param.name}")
        except (FetchError, ParseError) as e:
            logger.error(f"Error downloading parameter {param.name}: {e}")
            result.error = str(e)
            return result

        for filename in files:
            try:
                outcome = self.worker.retrieve(param, run_label, filename)
            except RetrievalExhausted as e:
                logger.error(f"Error downloading {e.url}: {e}")
                result.failed += 1
                continue

            if outcome == DOWNLOADED:
                result.downloaded += 1
            else:
                result.skipped += 1

        logger.debug(
            f"Parameter {param.name} done: {result.downloaded} downloaded, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result

    @staticmethod
    def _report(summary: DownloadSummary) -> None:
        logger.info(
            f"Download completed for run {summary.run.label}: "
            f"{len(summary.succeeded)} parameters succeeded, {len(summary.failed)} failed; "
            f"files: {summary.files_downloaded} downloaded, {summary.files_skipped} skipped, "
            f"{summary.files_failed} failed"
        )
        for result in summary.failed:
            reason = result.error or f"{result.failed} file(s) failed"
            logger.warning(f"Parameter {result.name} incomplete: {reason}")
