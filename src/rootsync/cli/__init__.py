"""rootsync CLI."""
