"""orbitctl - maintenance CLI for the orbit endpoint agent and its fleet server."""

__version__ = "0.3.0"
