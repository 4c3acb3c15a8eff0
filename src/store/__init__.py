"""Storage engine layer.

This module encodes typed leaf values, maps containers onto directories,
and manages the database directory and archive lifecycle.
"""
