"""
Key-level command dispatch onto the StdRegProv provider.

Every provider call made by the registry layer goes through
CommandDispatcher.invoke, which enforces the connected-session guard and
the response-object invariant in one place.
"""

import logging
from typing import Any, Dict, Mapping

from wmiregistry.errors import InvalidResponseError, NotConnectedError
from wmiregistry.models import RegCommand, RegistryHive
from wmiregistry.utils.win32.wmi import ProviderSession

logger = logging.getLogger(__name__)

# Provider parameter and response field names
HIVE_PARAM = "hDefKey"
SUB_KEY_PARAM = "sSubKeyName"
VALUE_NAME_PARAM = "sValueName"
REQUIRED_PARAM = "uRequired"
RETURN_VALUE = "ReturnValue"
GRANTED = "bGranted"
NAMES = "sNames"
TYPES = "Types"


def key_params(hive: RegistryHive, path: str) -> Dict[str, Any]:
    """Parameter set addressing a key: hive handle plus sub-key path."""
    return {HIVE_PARAM: int(hive), SUB_KEY_PARAM: path}


def succeeded(response: Mapping[str, Any]) -> bool:
    """True when a mutating command reported ReturnValue == 0."""
    code = response.get(RETURN_VALUE)
    if code != 0:
        logger.debug("Provider returned %s", code)
    return code == 0


class CommandDispatcher:
    """Turns (hive, path, command, required mask) into a provider invocation."""

    def __init__(self, session: ProviderSession):
        self.session = session

    def invoke(self, method: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Invoke a provider method on a connected session.

        Raises:
            NotConnectedError: Session is not connected. No call is made.
            InvalidResponseError: Provider returned no response object.
        """
        if not self.session.is_connected:
            raise NotConnectedError()

        logger.debug("Invoking %s(%s)", method, ", ".join(params))
        response = self.session.invoke(method, params)
        if response is None:
            raise InvalidResponseError(f"Provider returned no response for {method}")
        return response

    def execute(
        self,
        hive: RegistryHive,
        path: str,
        command: RegCommand,
        required: int = 0
    ) -> Dict[str, Any]:
        """
        Run a key-level command and return the raw response.

        Args:
            hive: Registry hive containing the path
            path: Backslash-delimited sub-key path
            command: Command to run; its value is the provider method name
            required: Access mask for CheckAccess. Attached only when non-zero,
                so an explicit mask of 0 is indistinguishable from no mask.

        Returns:
            Provider response fields
        """
        params = key_params(hive, path)
        if required != 0:
            params[REQUIRED_PARAM] = int(required)
        return self.invoke(command.value, params)
