"""Typed Windows Registry access through the WMI StdRegProv provider."""
from wmiregistry.errors import (
    InvalidResponseError,
    NotConnectedError,
    ProviderError,
    UnsupportedValueTypeError,
    WmiRegistryError,
)
from wmiregistry.models import AccessPermissions, RegCommand, RegistryHive, RegistryValueType, ValueMetadata
from wmiregistry.services.value_router import classify_string, infer_value_type
from wmiregistry.services.wmi_registry import WmiRegistry
from wmiregistry.utils.win32.wmi import ConnectionOptions, ProviderSession, WmiSession

__version__ = "0.1.0"
