"""Error taxonomy shared by the index engine, the CLI and the MCP transport."""


class VaultError(Exception):
    """Base class for all vaultdex errors."""


class InvalidInputError(VaultError, ValueError):
    """Caller supplied bad parameters. Raised before any filesystem mutation."""


class PathTraversalError(InvalidInputError):
    """A relative path tried to escape the vault root."""


class NoteNotFoundError(VaultError):
    """The requested note does not exist."""


class ConfigError(VaultError, ValueError):
    """The vault configuration file is malformed."""
