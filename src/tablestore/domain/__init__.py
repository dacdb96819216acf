"""Domain layer: values, entities, errors and table-level services."""
