"""Built-in data files (default configuration)."""
