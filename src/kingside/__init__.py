"""kingside — timed chess core with a computer opponent."""

__version__ = "0.1.0"
