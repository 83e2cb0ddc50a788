"""Translation pipeline and supporting services."""
