"""
ICON GRIB downloader (DWD Open Data).
"""

__version__ = "0.1.0"
