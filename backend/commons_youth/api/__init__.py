"""API packages."""
