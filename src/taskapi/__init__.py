"""Task API: CRUD over task records stored in MongoDB."""

__version__ = "0.1.0"
