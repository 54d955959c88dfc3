"""Analysis tools for commentstats."""
