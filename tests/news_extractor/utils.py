"""Constants shared by news extractor tests."""
from datetime import date


LISTING_URL = "https://unik-kediri.ac.id/list-berita"
FIXED_TODAY = date(2024, 5, 1)
