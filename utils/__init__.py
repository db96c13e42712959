"""Shared helpers: database error messages and the statement log."""
