"""Small shared helpers for the simulation core."""
