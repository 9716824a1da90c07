"""Content trust scoring and age recommendation for a curated kids' catalog."""

__version__ = "0.1.0"
