"""Headless-browser crawler for the PeopleSoft course catalog search form."""

__version__ = "0.1.0"
