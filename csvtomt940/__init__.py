"""Convert ING and N26 CSV exports into MT940 statements."""

__version__ = "1.0.0"