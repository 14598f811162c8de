"""Ponder daily posting/viewing cycle: shared phase, window and trigger logic."""
