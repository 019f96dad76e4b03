"""Re-encode the file names stored inside zip archives to UTF-8."""

__version__ = "0.1.0"
