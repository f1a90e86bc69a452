"""Exception types raised by the Abyss packages.

Data-source failures are absorbed by ``GridProvider`` and the server's
CSV loader; everything else propagates to the caller.
"""

from __future__ import annotations


class AbyssError(Exception):
    """Base class for all Abyss errors."""


class GridFormatError(AbyssError):
    """A grid payload does not have the expected shape."""


class ConfigError(AbyssError):
    """A configuration file or value is invalid."""
