"""Decomposition stages, one module per stage, registered on import."""
