import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch
import sys

import requests

sys.path.append(str(Path(__file__).parent.parent))

from icongrib.base import FILE_TIMEOUT, LISTING_TIMEOUT, HttpTransport
from icongrib.errors import FetchError


class TestHttpTransport(unittest.TestCase):

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp(prefix="icongrib_test_"))

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    @patch('icongrib.base.requests.Session')
    def test_fetch_text(self, mock_session):
        mock_get = MagicMock()
        mock_get.status_code = 200
        mock_get.text = "<html></html>"
        mock_session.return_value.get.return_value = mock_get

        transport = HttpTransport()

        self.assertEqual(transport.fetch_text("https://example.test/"), "<html></html>")
        mock_session.return_value.get.assert_called_once_with("https://example.test/", timeout=LISTING_TIMEOUT)

    @patch('icongrib.base.requests.Session')
    def test_non_success_status_is_fetch_error(self, mock_session):
        mock_get = MagicMock()
        mock_get.raise_for_status.side_effect = requests.HTTPError("404 Client Error: Not Found")
        mock_session.return_value.get.return_value = mock_get

        with self.assertRaises(FetchError) as ctx:
            HttpTransport().fetch_text("https://example.test/missing/")
        self.assertEqual(ctx.exception.url, "https://example.test/missing/")
        self.assertIn("404", str(ctx.exception))

    @patch('icongrib.base.requests.Session')
    def test_connection_error_is_fetch_error(self, mock_session):
        mock_session.return_value.get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(FetchError):
            HttpTransport().fetch_text("https://example.test/")

    @patch('icongrib.base.requests.Session')
    def test_fetch_to_file_streams_body(self, mock_session):
        mock_get = MagicMock()
        mock_get.status_code = 200
        mock_get.iter_content.return_value = [b"BZh9", b"", b"data"]
        mock_session.return_value.get.return_value.__enter__.return_value = mock_get

        target = self.test_dir / "file.bz2.tmp"
        HttpTransport().fetch_to_file("https://example.test/file.bz2", target)

        self.assertEqual(target.read_bytes(), b"BZh9data")
        mock_session.return_value.get.assert_called_once_with(
            "https://example.test/file.bz2", stream=True, timeout=FILE_TIMEOUT
        )

    @patch('icongrib.base.requests.Session')
    def test_fetch_to_file_status_error(self, mock_session):
        mock_get = MagicMock()
        mock_get.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_session.return_value.get.return_value.__enter__.return_value = mock_get

        with self.assertRaises(FetchError):
            HttpTransport().fetch_to_file("https://example.test/file.bz2", self.test_dir / "x.tmp")


if __name__ == "__main__":
    unittest.main()
