"""Dataset storage layer.

This module holds published datasets keyed by URL and mime type.
It answers containment and enumeration queries for the registry.
"""
