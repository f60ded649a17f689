"""Top-level package for feature modules (``features.<name>.domain`` etc.)."""
