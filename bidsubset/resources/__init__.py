"""Packaged data files (default *subset.yaml*)."""
