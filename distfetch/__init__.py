"""distfetch — mirror one Tor Browser release from dist.torproject.org."""

__version__ = "0.1.0"
