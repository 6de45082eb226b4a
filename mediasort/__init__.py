"""Copy media into YYYY/MM/DD folders by capture date, skipping duplicates."""

__version__ = "1.0.0"
