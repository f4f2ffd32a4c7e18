"""Filmlog: a social film-logging API backed by TMDB."""

__version__ = "1.0.0"
