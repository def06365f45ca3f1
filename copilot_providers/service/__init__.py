"""Service layer: presentation entrypoints (CLI) over the provider packages."""
