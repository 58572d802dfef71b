"""Infrastructure adapters for logging, validation and access control."""
