"""Support helpers shared by the CLI and the subset pipeline."""
