"""Windows Registry access through the WMI StdRegProv provider."""

import logging
from typing import Any, List, Optional

from wmiregistry.models import AccessPermissions, RegCommand, RegistryHive, RegistryValueType, ValueMetadata
from wmiregistry.services.command_dispatcher import GRANTED, CommandDispatcher, succeeded
from wmiregistry.services.enumeration import EnumerationDecoder
from wmiregistry.services.value_router import ValueRouter
from wmiregistry.utils.win32.wmi import ConnectionOptions, ProviderSession, WmiSession

logger = logging.getLogger(__name__)


class WmiRegistry:
    """
    Typed, hive-scoped access to a local or remote registry over WMI.

    The session must be connected before any registry operation; nothing
    here connects or reconnects on its own.

    Usage:
        registry = WmiRegistry.remote("10.0.0.5", "admin", "secret")
        registry.connect()
        registry.try_create_sub_key(RegistryHive.CurrentUser, r"SOFTWARE\\Acme")
        registry.try_set_value(RegistryHive.CurrentUser, r"SOFTWARE\\Acme", "Home", "%USERPROFILE%")
    """

    def __init__(
        self,
        session: Optional[ProviderSession] = None,
        options: Optional[ConnectionOptions] = None
    ) -> None:
        """
        Args:
            session: Provider session to use (default: a WmiSession)
            options: Connection options for the default WmiSession
        """
        self.session = session if session is not None else WmiSession(options)
        self._dispatcher = CommandDispatcher(self.session)
        self._values = ValueRouter(self._dispatcher)
        self._enumeration = EnumerationDecoder(self._dispatcher)

    @classmethod
    def local(cls) -> "WmiRegistry":
        """Registry of the local machine."""
        return cls(options=ConnectionOptions())

    @classmethod
    def remote(cls, host: str, user: str, password: str) -> "WmiRegistry":
        """Registry of a remote machine, by IP or workgroup machine name."""
        return cls(options=ConnectionOptions(host=host, user=user, password=password))

    @property
    def is_connected(self) -> bool:
        """Whether the provider session is connected."""
        return self.session.is_connected

    def connect(self) -> None:
        """Connect the provider session."""
        self.session.connect()

    def check_access(self, hive: RegistryHive, path: str, permissions: AccessPermissions) -> bool:
        """
        Check that the caller holds all of the given permissions on a key.

        An empty permission set sends no uRequired parameter, and the
        result is whatever the provider reports for that case.
        """
        mask = int(permissions)
        if mask == 0:
            logger.debug("CheckAccess on %s\\%s with an empty permission mask", hive.name, path)
        response = self._dispatcher.execute(hive, path, RegCommand.CheckAccess, mask)
        return bool(response.get(GRANTED))

    def try_delete_sub_key(self, hive: RegistryHive, path: str) -> bool:
        """Delete the leaf key of path. Returns True on success."""
        return succeeded(self._dispatcher.execute(hive, path, RegCommand.DeleteKey))

    def try_create_sub_key(self, hive: RegistryHive, path: str) -> bool:
        """Create every missing key along path. Returns True on success."""
        return succeeded(self._dispatcher.execute(hive, path, RegCommand.CreateKey))

    def enumerate_sub_keys(self, hive: RegistryHive, path: str) -> List[str]:
        """Names of the sub-keys directly under path."""
        return self._enumeration.enumerate_sub_keys(hive, path)

    def enumerate_value_names(self, hive: RegistryHive, path: str) -> List[ValueMetadata]:
        """Names and types of the values stored under path, in provider order."""
        return self._enumeration.enumerate_value_names(hive, path)

    def get_value(
        self,
        hive: RegistryHive,
        path: str,
        name: str,
        value_type: RegistryValueType
    ) -> Optional[Any]:
        """
        Retrieve a named value. Use name="" for the key's default value.

        Returns:
            bytes, int, str or list of str depending on value_type;
            None if the name/value pair does not exist
        """
        return self._values.get_value(hive, path, name, value_type)

    def try_set_value(
        self,
        hive: RegistryHive,
        path: str,
        name: str,
        value: Any,
        value_type: Optional[RegistryValueType] = None
    ) -> bool:
        """
        Create or update a named value under an existing key.

        Without value_type the type follows the Python value: bytes as
        Binary, int as DWord (QWord above 32 bits), a list of str as
        MultiString, and str as String, or ExpandedString when framed
        with '%'.

        Returns:
            True if the operation was successful, False if not
        """
        return self._values.set_value(hive, path, name, value, value_type)
