"""
Value-type routing for named values.

Maps each registry value type to its provider getter/setter and to the
payload slot (uValue or sValue) that carries its data, and converts values
between Python and the provider's wire representation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from wmiregistry.errors import UnsupportedValueTypeError
from wmiregistry.models import RegistryHive, RegistryValueType
from wmiregistry.services.command_dispatcher import (
    RETURN_VALUE,
    VALUE_NAME_PARAM,
    CommandDispatcher,
    key_params,
    succeeded,
)

logger = logging.getLogger(__name__)

DWORD_MAX = 0xFFFFFFFF
QWORD_MAX = 0xFFFFFFFFFFFFFFFF


class PayloadSlot(Enum):
    """Request/response field carrying a value's data."""
    NUMERIC = "uValue"      # DWORD, QWORD and binary data
    STRING = "sValue"       # REG_SZ, REG_EXPAND_SZ and REG_MULTI_SZ data


@dataclass(frozen=True)
class ValueMethods:
    """Provider methods and payload slot for one value type."""
    getter: str
    setter: str
    slot: PayloadSlot


VALUE_METHODS: Mapping[RegistryValueType, ValueMethods] = MappingProxyType({
    RegistryValueType.Binary: ValueMethods("GetBinaryValue", "SetBinaryValue", PayloadSlot.NUMERIC),
    RegistryValueType.DWord: ValueMethods("GetDWORDValue", "SetDWORDValue", PayloadSlot.NUMERIC),
    RegistryValueType.QWord: ValueMethods("GetQWORDValue", "SetQWORDValue", PayloadSlot.NUMERIC),
    RegistryValueType.String: ValueMethods("GetStringValue", "SetStringValue", PayloadSlot.STRING),
    RegistryValueType.ExpandedString: ValueMethods(
        "GetExpandedStringValue", "SetExpandedStringValue", PayloadSlot.STRING
    ),
    RegistryValueType.MultiString: ValueMethods(
        "GetMultiStringValue", "SetMultiStringValue", PayloadSlot.STRING
    ),
})


@dataclass(frozen=True)
class NumericPayload:
    """Wire data for the uValue slot: an int, a decimal QWORD string or a byte list."""
    value: Union[int, str, List[int]]
    slot: ClassVar[PayloadSlot] = PayloadSlot.NUMERIC


@dataclass(frozen=True)
class StringPayload:
    """Wire data for the sValue slot: a string or a list of strings."""
    value: Union[str, List[str]]
    slot: ClassVar[PayloadSlot] = PayloadSlot.STRING


Payload = Union[NumericPayload, StringPayload]


def methods_for(value_type: RegistryValueType) -> ValueMethods:
    """Look up the provider methods for a value type.

    Raises:
        UnsupportedValueTypeError: If value_type is not a RegistryValueType.
    """
    try:
        return VALUE_METHODS[value_type]
    except (KeyError, TypeError):
        raise UnsupportedValueTypeError(f"Unsupported registry value type: {value_type!r}") from None


def classify_string(value: str) -> RegistryValueType:
    """String or ExpandedString, by whether the text is framed with '%'.

    A literal such as '%50%' is classified as ExpandedString as well; pass
    an explicit value type to store it as a plain string.
    """
    if value.startswith("%") and value.endswith("%"):
        return RegistryValueType.ExpandedString
    return RegistryValueType.String


def infer_value_type(value: Any) -> RegistryValueType:
    """Pick a value type from the Python type of value."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RegistryValueType.Binary
    if isinstance(value, str):
        return classify_string(value)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return RegistryValueType.MultiString
    if isinstance(value, int) and not isinstance(value, bool):
        return RegistryValueType.DWord if 0 <= value <= DWORD_MAX else RegistryValueType.QWord
    raise UnsupportedValueTypeError(f"Cannot infer a registry value type for {type(value).__name__}")


def _check_int(value: Any, maximum: int, value_type: RegistryValueType) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{value_type.name} value must be an int, got {type(value).__name__}")
    if not 0 <= value <= maximum:
        raise ValueError(f"{value_type.name} value out of range: {value}")
    return value


def make_payload(value_type: RegistryValueType, value: Any) -> Payload:
    """Validate value for value_type and convert it to its wire payload."""
    methods_for(value_type)

    if value_type is RegistryValueType.Binary:
        if isinstance(value, (str, int)):
            raise TypeError(f"Binary value must be bytes, not {type(value).__name__}")
        return NumericPayload(list(bytes(value)))
    if value_type is RegistryValueType.DWord:
        return NumericPayload(_check_int(value, DWORD_MAX, value_type))
    if value_type is RegistryValueType.QWord:
        # SWbemScripting carries uint64 as a decimal string
        return NumericPayload(str(_check_int(value, QWORD_MAX, value_type)))
    if value_type is RegistryValueType.MultiString:
        if isinstance(value, str):
            raise TypeError("MultiString value must be an iterable of str, not str")
        items = list(value)
        if not all(isinstance(item, str) for item in items):
            raise TypeError("MultiString value must be an iterable of str")
        return StringPayload(items)

    if not isinstance(value, str):
        raise TypeError(f"{value_type.name} value must be a str, got {type(value).__name__}")
    return StringPayload(value)


def serialize_payload(payload: Payload) -> Dict[str, Any]:
    """Request parameters carrying the payload."""
    return {payload.slot.value: payload.value}


def decode_value(value_type: RegistryValueType, raw: Any) -> Any:
    """Convert a response payload to its Python value. None stays None."""
    if raw is None:
        return None
    if value_type is RegistryValueType.Binary:
        return bytes(raw)
    if value_type is RegistryValueType.DWord:
        # uint32 can surface as a signed VT_I4
        return int(raw) & DWORD_MAX
    if value_type is RegistryValueType.QWord:
        return int(raw)
    if value_type is RegistryValueType.MultiString:
        return [str(item) for item in raw]
    return str(raw)


class ValueRouter:
    """Reads and writes named values through the type-specific provider methods."""

    def __init__(self, dispatcher: CommandDispatcher):
        self.dispatcher = dispatcher

    def get_value(
        self,
        hive: RegistryHive,
        path: str,
        name: str,
        value_type: RegistryValueType
    ) -> Optional[Any]:
        """Return the value of name, or None if the name/value pair does not exist."""
        methods = methods_for(value_type)
        params = key_params(hive, path)
        params[VALUE_NAME_PARAM] = name

        response = self.dispatcher.invoke(methods.getter, params)
        raw = response.get(methods.slot.value)
        if raw is None or response.get(RETURN_VALUE, 0) != 0:
            logger.debug("%s: no value %r under %s\\%s", methods.getter, name, hive.name, path)
            return None
        return decode_value(value_type, raw)

    def set_value(
        self,
        hive: RegistryHive,
        path: str,
        name: str,
        value: Any,
        value_type: Optional[RegistryValueType] = None
    ) -> bool:
        """
        Create or overwrite a named value. The containing key must exist.

        Args:
            value_type: Explicit type. When None it is inferred from value,
                with '%'-framed strings written as ExpandedString.

        Returns:
            True if the provider reported success
        """
        if value_type is None:
            value_type = infer_value_type(value)
        methods = methods_for(value_type)
        payload = make_payload(value_type, value)

        params = key_params(hive, path)
        params[VALUE_NAME_PARAM] = name
        params.update(serialize_payload(payload))
        return succeeded(self.dispatcher.invoke(methods.setter, params))
