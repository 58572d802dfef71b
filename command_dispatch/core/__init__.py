"""Core layer: configuration, results, errors and the composition root."""
