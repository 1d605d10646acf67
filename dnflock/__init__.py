"""RPM repository metadata, reduction, lock files, tar header ordering and ELF library closures."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "config",
    "filter",
    "ldd",
    "loader",
    "lockconfig",
    "lockfile",
    "order",
    "reducer",
    "template",
]