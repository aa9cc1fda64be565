"""Full-screen terminal interface for managing packwiz modpacks kept in git."""

__version__ = "0.1.0"
__all__ = ["__version__"]