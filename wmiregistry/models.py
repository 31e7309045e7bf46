"""Registry data model shared by the dispatcher, router and decoder."""
from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag


class RegistryHive(IntEnum):
    """Root key of the registry, backed by the provider's hDefKey handle."""
    ClassesRoot = 0x80000000
    CurrentUser = 0x80000001
    LocalMachine = 0x80000002
    Users = 0x80000003
    CurrentConfig = 0x80000005

    @classmethod
    def from_name(cls, name: str) -> "RegistryHive":
        """Resolve a hive from 'LocalMachine', 'HKEY_LOCAL_MACHINE' or 'HKLM'.

        Raises:
            ValueError: If the name does not match any hive.
        """
        key = name.strip().upper()
        for hive in cls:
            if key in (hive.name.upper(), _ROOT_KEY_NAMES[hive], _ROOT_KEY_ABBREVIATIONS[hive]):
                return hive
        raise ValueError(f"Unknown registry hive: {name!r}")


_ROOT_KEY_NAMES = {
    RegistryHive.ClassesRoot: "HKEY_CLASSES_ROOT",
    RegistryHive.CurrentUser: "HKEY_CURRENT_USER",
    RegistryHive.LocalMachine: "HKEY_LOCAL_MACHINE",
    RegistryHive.Users: "HKEY_USERS",
    RegistryHive.CurrentConfig: "HKEY_CURRENT_CONFIG",
}

_ROOT_KEY_ABBREVIATIONS = {
    RegistryHive.ClassesRoot: "HKCR",
    RegistryHive.CurrentUser: "HKCU",
    RegistryHive.LocalMachine: "HKLM",
    RegistryHive.Users: "HKU",
    RegistryHive.CurrentConfig: "HKCC",
}


class RegistryValueType(Enum):
    """Data type of a named value."""
    DWord = "dword"
    QWord = "qword"
    Binary = "binary"
    String = "string"
    ExpandedString = "expanded_string"
    MultiString = "multi_string"


class AccessPermissions(IntFlag):
    """Registry key access rights, combined into the uRequired mask."""
    KeyQueryValue = 0x0001
    KeySetValue = 0x0002
    KeyCreateSubKey = 0x0004
    KeyEnumerateSubKeys = 0x0008
    KeyNotify = 0x0010
    KeyCreate = 0x0020
    Delete = 0x00010000
    ReadControl = 0x00020000
    WriteDac = 0x00040000
    WriteOwner = 0x00080000


class RegCommand(Enum):
    """Key-level provider commands. The value is the provider method name."""
    CheckAccess = "CheckAccess"
    EnumKey = "EnumKey"
    EnumValues = "EnumValues"
    DeleteKey = "DeleteKey"
    CreateKey = "CreateKey"


@dataclass(frozen=True)
class ValueMetadata:
    """Name and type of a named value, as reported by enumeration."""
    name: str
    type: RegistryValueType
