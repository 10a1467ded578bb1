"""Static registries consumed by core services."""
