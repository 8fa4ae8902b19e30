"""Converter graph layer.

This module holds converter definitions between mime types.
It computes reachability and drives lazy multi-step conversions.
"""
