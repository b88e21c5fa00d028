"""GSS codebook scraping and parsing pipeline."""

__version__ = "0.1.0"
