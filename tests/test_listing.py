import datetime as dt
import itertools
import unittest
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from icongrib.components.listing import (
    extract_links,
    is_compressed_grib,
    is_directory_link,
    list_all_links,
    parse_run_listing,
)
from tests.fakes import BASE_URL, anchor_listing, run_listing, run_row

GOOD_ROWS = [
    run_row("00", "12-Mar-2025 02:39"),
    run_row("06", "12-Mar-2025 08:41"),
    run_row("12", "11-Mar-2025 14:38"),
]
BAD_ROWS = [
    run_row("18", "32-Mar-2025 20:40"),       # impossible day
    run_row("03", "12-Foo-2025 04:00"),       # unknown month
    '<a href="latest/">latest/</a>            12-Mar-2025 02:39    -',
    '<a href="09/">09/</a>                                 -',
]


class TestRunListing(unittest.TestCase):

    def test_parses_labels_urls_and_timestamps(self):
        runs = list(parse_run_listing(run_listing(GOOD_ROWS), BASE_URL))

        self.assertEqual([r.label for r in runs], ["00", "06", "12"])
        self.assertEqual(runs[0].url, BASE_URL + "00/")
        self.assertEqual(runs[1].published_at, dt.datetime(2025, 3, 12, 8, 41))

    def test_malformed_rows_are_skipped_in_any_order(self):
        rows = GOOD_ROWS[:2] + BAD_ROWS[:2]
        for order in itertools.permutations(rows):
            runs = list(parse_run_listing(run_listing(order), BASE_URL))
            self.assertEqual(len(runs), 2, order)

    def test_interleaved_rows_keep_every_good_entry(self):
        rows = [GOOD_ROWS[0], BAD_ROWS[0], GOOD_ROWS[1], BAD_ROWS[2], BAD_ROWS[3], GOOD_ROWS[2], BAD_ROWS[1]]
        runs = list(parse_run_listing(run_listing(rows), BASE_URL))
        self.assertEqual(sorted(r.label for r in runs), ["00", "06", "12"])

    def test_parsing_is_lazy(self):
        entries = parse_run_listing(run_listing(GOOD_ROWS), BASE_URL)
        self.assertEqual(next(entries).label, "00")

    def test_empty_document_yields_nothing(self):
        self.assertEqual(list(parse_run_listing("<html></html>", BASE_URL)), [])


class TestExtractLinks(unittest.TestCase):

    def test_directory_links_exclude_parent(self):
        page = anchor_listing(["t_2m/", "clct/", "README.txt"])
        self.assertEqual(list(extract_links(page, is_directory_link)), ["t_2m/", "clct/"])

    def test_grib_links(self):
        page = anchor_listing([
            "icon-eu_europe_regular-lat-lon_single-level_2025031200_000_T_2M.grib2.bz2",
            "icon-eu_europe_regular-lat-lon_single-level_2025031200_001_T_2M.grib2.bz2",
            "icon-eu_europe_regular-lat-lon_single-level_2025031200_000_T_2M.grib2",
            "notes.bz2",
        ])
        links = list(extract_links(page, is_compressed_grib))
        self.assertEqual(len(links), 2)
        self.assertTrue(all(link.endswith(".grib2.bz2") for link in links))

    def test_link_extraction_is_lazy(self):
        links = extract_links(anchor_listing(["t_2m/", "clct/"]), is_directory_link)
        self.assertEqual(next(links), "t_2m/")
        self.assertEqual(list(links), ["clct/"])

    def test_anchors_without_href_are_ignored(self):
        page = '<html><body><a name="top">top</a><a href="pmsl/">pmsl/</a></body></html>'
        self.assertEqual(list_all_links(page), ["pmsl/"])


if __name__ == "__main__":
    unittest.main()
