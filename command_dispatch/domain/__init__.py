"""Domain layer: dispatch entities, value objects and collaborator protocols."""
