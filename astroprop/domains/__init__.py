"""Domain modules that plug into the propagation pipeline."""
