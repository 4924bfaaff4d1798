"""Procedural pattern generator and adaptive scoring engine for a memory game."""

__version__ = "0.1.0"
