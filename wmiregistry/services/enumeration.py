"""Decoding of EnumKey / EnumValues responses."""
import logging
from types import MappingProxyType
from typing import Any, List, Mapping

from wmiregistry.errors import InvalidResponseError
from wmiregistry.models import RegCommand, RegistryHive, RegistryValueType, ValueMetadata
from wmiregistry.services.command_dispatcher import NAMES, TYPES, CommandDispatcher

logger = logging.getLogger(__name__)

# REG_* type codes reported in the Types array
TYPE_CODES: Mapping[int, RegistryValueType] = MappingProxyType({
    1: RegistryValueType.String,            # REG_SZ
    2: RegistryValueType.ExpandedString,    # REG_EXPAND_SZ
    3: RegistryValueType.Binary,            # REG_BINARY
    4: RegistryValueType.DWord,             # REG_DWORD
    7: RegistryValueType.MultiString,       # REG_MULTI_SZ
    11: RegistryValueType.QWord,            # REG_QWORD
})


def type_from_code(code: int) -> RegistryValueType:
    """Map a REG_* code to a value type. Unknown codes fall back to String."""
    return TYPE_CODES.get(int(code), RegistryValueType.String)


def decode_value_names(response: Mapping[str, Any]) -> List[ValueMetadata]:
    """Zip the sNames/Types parallel arrays into ValueMetadata records.

    Provider order is preserved. Null arrays (a key without values) decode
    to an empty list.

    Raises:
        InvalidResponseError: If the arrays are not the same length.
    """
    names = list(response.get(NAMES) or ())
    types = list(response.get(TYPES) or ())
    if len(names) != len(types):
        raise InvalidResponseError(
            f"EnumValues returned {len(names)} names but {len(types)} types"
        )
    return [ValueMetadata(str(name), type_from_code(code)) for name, code in zip(names, types)]


def decode_sub_keys(response: Mapping[str, Any]) -> List[str]:
    """Sub-key names in provider order; empty if the key has none."""
    return [str(name) for name in response.get(NAMES) or ()]


class EnumerationDecoder:
    """Enumerates sub-keys and named values of a key."""

    def __init__(self, dispatcher: CommandDispatcher):
        self.dispatcher = dispatcher

    def enumerate_sub_keys(self, hive: RegistryHive, path: str) -> List[str]:
        response = self.dispatcher.execute(hive, path, RegCommand.EnumKey)
        return decode_sub_keys(response)

    def enumerate_value_names(self, hive: RegistryHive, path: str) -> List[ValueMetadata]:
        response = self.dispatcher.execute(hive, path, RegCommand.EnumValues)
        entries = decode_value_names(response)
        logger.debug("%d values under %s\\%s", len(entries), hive.name, path)
        return entries
