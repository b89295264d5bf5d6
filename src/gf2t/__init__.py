"""gf2t — assess Git Flow repositories for a move to trunk-based development."""

__version__ = "0.1.0"
