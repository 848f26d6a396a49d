"""Record types shared across the pipelines."""
