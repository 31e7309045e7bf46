"""Exceptions raised by the registry layer.

A value that does not exist is not an error: getters return None and
mutating calls report failure through their boolean result.
"""


class WmiRegistryError(Exception):
    """Base class for all registry layer errors."""


class NotConnectedError(WmiRegistryError):
    """The provider session is not connected. Call connect() first."""

    def __init__(self, message: str = "The registry provider session is not connected"):
        super().__init__(message)


class InvalidResponseError(WmiRegistryError):
    """The provider returned no response object, or a malformed one."""


class UnsupportedValueTypeError(WmiRegistryError, ValueError):
    """A value type tag (or Python value) outside the six registry value types."""


class ProviderError(WmiRegistryError):
    """The COM layer failed while connecting or executing a provider method."""
