"""Browser-driven diagram rendering."""
