"""StdRegProv session over WMI COM using win32com.client."""
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

from wmiregistry.errors import NotConnectedError, ProviderError

logger = logging.getLogger(__name__)

PROVIDER_CLASS = "StdRegProv"
DEFAULT_NAMESPACE = r"root\cimv2"

# WbemImpersonationLevelEnum / WbemAuthenticationLevelEnum
IMPERSONATE = 3
AUTHENTICATION_DEFAULT = 0


class ProviderSession(Protocol):
    """Capability the registry layer needs from a provider connection."""

    @property
    def is_connected(self) -> bool: ...

    def connect(self) -> None: ...

    def invoke(self, method: str, params: Mapping[str, Any]) -> Optional[Dict[str, Any]]: ...


@dataclass(frozen=True)
class ConnectionOptions:
    """Where and how to reach the provider. host=None means the local machine."""
    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    namespace: str = DEFAULT_NAMESPACE
    impersonation_level: int = IMPERSONATE
    authentication_level: int = AUTHENTICATION_DEFAULT
    privileges: Tuple[str, ...] = ()

    @property
    def is_remote(self) -> bool:
        return bool(self.host) and self.host not in (".", "localhost")

    @classmethod
    def from_env(cls) -> "ConnectionOptions":
        """Build options from WMIREG_HOST, WMIREG_USER, WMIREG_PASSWORD, WMIREG_NAMESPACE."""
        return cls(
            host=os.environ.get("WMIREG_HOST") or None,
            user=os.environ.get("WMIREG_USER") or None,
            password=os.environ.get("WMIREG_PASSWORD") or None,
            namespace=os.environ.get("WMIREG_NAMESPACE") or DEFAULT_NAMESPACE,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(host={self.host!r}, user={self.user!r}, "
            f"namespace={self.namespace!r})"
        )


class WmiSession:
    """WMI COM session bound to the StdRegProv class. Connect once per thread.

    COM is initialized in connect() via pythoncom.CoInitialize. pywin32 is
    imported there as well, so constructing a session never touches COM.
    """

    def __init__(self, options: Optional[ConnectionOptions] = None):
        self.options = options or ConnectionOptions()
        self._provider = None

    @property
    def is_connected(self) -> bool:
        """Whether connect() has bound the provider class."""
        return self._provider is not None

    def connect(self) -> None:
        """Connect to the WMI namespace and bind StdRegProv.

        Raises:
            ProviderError: If the locator cannot connect or the class is missing.
        """
        import pythoncom
        import win32com.client

        opts = self.options
        server = opts.host if opts.is_remote else "."
        pythoncom.CoInitialize()
        try:
            locator = win32com.client.Dispatch("WbemScripting.SWbemLocator")
            services = locator.ConnectServer(server, opts.namespace, opts.user, opts.password)
            services.Security_.ImpersonationLevel = opts.impersonation_level
            services.Security_.AuthenticationLevel = opts.authentication_level
            for privilege in opts.privileges:
                services.Security_.Privileges.AddAsString(privilege, True)
            self._provider = services.Get(PROVIDER_CLASS)
        except pythoncom.com_error as e:
            logger.warning("WMI connect to %s\\%s failed: %s", server, opts.namespace, e)
            raise ProviderError(f"Cannot connect to {PROVIDER_CLASS} on {server}: {e}") from e
        logger.debug("Connected to %s on %s\\%s", PROVIDER_CLASS, server, opts.namespace)

    def invoke(self, method: str, params: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Execute a provider method, return its out-parameters as a dict.

        Returns None if the provider produced no out-parameters object.
        """
        if self._provider is None:
            raise NotConnectedError()
        import pythoncom

        try:
            in_params = self._provider.Methods_.Item(method).InParameters.SpawnInstance_()
            for name, value in params.items():
                in_params.Properties_.Item(name).Value = value
            out = self._provider.ExecMethod_(method, in_params)
        except pythoncom.com_error as e:
            logger.warning("WMI method %s failed: %s", method, e)
            raise ProviderError(f"{PROVIDER_CLASS}.{method} failed: {e}") from e
        if out is None:
            return None
        return {prop.Name: prop.Value for prop in out.Properties_}
