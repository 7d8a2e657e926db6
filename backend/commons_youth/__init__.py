"""Commons youth directory backend."""
