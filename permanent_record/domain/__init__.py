"""Core record model, normalisation and query engine."""
