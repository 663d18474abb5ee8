"""
Catalog and outcome records.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class RunEntry:
    label: str              # two-digit run hour, e.g. "00", "12"
    url: str                # run directory URL
    published_at: dt.datetime


@dataclass(frozen=True)
class ParameterEntry:
    name: str               # e.g. "t_2m"
    url: str                # parameter directory URL


@dataclass
class ParameterResult:
    name: str
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.error is None


@dataclass
class DownloadSummary:
    run: RunEntry
    results: List[ParameterResult] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ParameterResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[ParameterResult]:
        return [r for r in self.results if not r.ok]

    @property
    def files_downloaded(self) -> int:
        return sum(r.downloaded for r in self.results)

    @property
    def files_skipped(self) -> int:
        return sum(r.skipped for r in self.results)

    @property
    def files_failed(self) -> int:
        return sum(r.failed for r in self.results)
