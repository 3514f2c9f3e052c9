"""Bundled data files (the default trust-list JSON Schema)."""
