"""Registry orchestration layer.

This module composes the dataset store and converter graph into the
facade hosting applications call.
"""
