"""Domain layer: configuration, quotes and computed views."""
