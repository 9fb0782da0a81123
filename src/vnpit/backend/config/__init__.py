"""Regime configuration schema, loader, validator and settings editor."""
