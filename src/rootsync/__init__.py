"""rootsync — root surface synchronization for UI test drivers."""

__version__ = "0.1.0"
