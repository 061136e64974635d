"""vaultdex - live tag/title index over a Markdown note vault."""

__version__ = "0.1.0"
