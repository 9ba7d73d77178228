"""Kida template integration and the built-in page layout."""
