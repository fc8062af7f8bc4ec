#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/utils/__init__.py
"""Utility helpers shared by the rfcxml renderer, walker and CLI."""
