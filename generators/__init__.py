"""Demo data generators."""
