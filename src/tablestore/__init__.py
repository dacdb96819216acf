"""
Table Store - minimal relational record store

An in-memory collection of named tables with typed rows, served over a
JSON HTTP API and persisted as a single JSON snapshot after every change.
"""

__version__ = "0.1.0"
