"""Console entrypoints for the hpm CLI."""
