"""Backtracking block packer: board, catalog, search engine and cross-checks."""
