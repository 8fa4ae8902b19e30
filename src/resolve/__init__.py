"""URL and viewer resolution.

This module maps raw URLs to initial datasets and encodes viewer
labels into the pseudo mime type namespace.
"""
