"""Deterministic rules engine for a sliding-tile merge puzzle."""
