"""In-memory StdRegProv used as a provider session in tests."""
from typing import Any, Dict, List, Mapping, Optional, Tuple

from wmiregistry.models import RegistryHive

SUCCESS = 0
NOT_FOUND = 2
ACCESS_DENIED = 5

# Setter/getter suffix -> (REG_* code, payload slot)
VALUE_KINDS = {
    "StringValue": (1, "sValue"),
    "ExpandedStringValue": (2, "sValue"),
    "BinaryValue": (3, "uValue"),
    "DWORDValue": (4, "uValue"),
    "MultiStringValue": (7, "sValue"),
    "QWORDValue": (11, "uValue"),
}


class FakeKey:
    def __init__(self, name: str):
        self.name = name
        self.sub_keys: Dict[str, "FakeKey"] = {}
        self.values: Dict[str, Tuple[str, int, Any]] = {}


def _parts(path: str) -> List[str]:
    return [part for part in path.split("\\") if part]


class FakeStdRegProv:
    """Implements connect/is_connected/invoke against an in-memory registry.

    Every invocation is recorded in `calls`. Entries in `responses` replace
    the computed response for a method name (None simulates a missing
    response object).
    """

    def __init__(self, connected: bool = True):
        self._connected = connected
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.responses: Dict[str, Optional[Dict[str, Any]]] = {}
        self.granted = True
        self.hives = {int(hive): FakeKey(hive.name) for hive in RegistryHive}

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def invoke(self, method: str, params: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self.calls.append((method, dict(params)))
        if method in self.responses:
            return self.responses[method]
        if method.startswith(("Get", "Set")) and method[3:] in VALUE_KINDS:
            code, slot = VALUE_KINDS[method[3:]]
            if method.startswith("Get"):
                return self._get_value(params, code, slot)
            return self._set_value(params, code, slot)
        return getattr(self, "_" + method)(params)

    # -- key helpers

    def find(self, hive: int, path: str) -> Optional[FakeKey]:
        key = self.hives[hive]
        for part in _parts(path):
            key = key.sub_keys.get(part.lower())
            if key is None:
                return None
        return key

    def add_value(self, hive: RegistryHive, path: str, name: str, code: int, data: Any) -> None:
        """Seed a value directly, bypassing the provider methods."""
        self._CreateKey({"hDefKey": int(hive), "sSubKeyName": path})
        self.find(int(hive), path).values[name.lower()] = (name, code, data)

    # -- provider methods

    def _CreateKey(self, params):
        key = self.hives[params["hDefKey"]]
        for part in _parts(params["sSubKeyName"]):
            key = key.sub_keys.setdefault(part.lower(), FakeKey(part))
        return {"ReturnValue": SUCCESS}

    def _DeleteKey(self, params):
        parts = _parts(params["sSubKeyName"])
        parent = self.find(params["hDefKey"], "\\".join(parts[:-1]))
        if not parts or parent is None or parts[-1].lower() not in parent.sub_keys:
            return {"ReturnValue": NOT_FOUND}
        if parent.sub_keys[parts[-1].lower()].sub_keys:
            return {"ReturnValue": ACCESS_DENIED}
        del parent.sub_keys[parts[-1].lower()]
        return {"ReturnValue": SUCCESS}

    def _EnumKey(self, params):
        key = self.find(params["hDefKey"], params["sSubKeyName"])
        if key is None:
            return {"ReturnValue": NOT_FOUND, "sNames": None}
        names = tuple(child.name for child in key.sub_keys.values())
        return {"ReturnValue": SUCCESS, "sNames": names or None}

    def _EnumValues(self, params):
        key = self.find(params["hDefKey"], params["sSubKeyName"])
        if key is None:
            return {"ReturnValue": NOT_FOUND, "sNames": None, "Types": None}
        if not key.values:
            return {"ReturnValue": SUCCESS, "sNames": None, "Types": None}
        names = tuple(name for name, _, _ in key.values.values())
        types = tuple(code for _, code, _ in key.values.values())
        return {"ReturnValue": SUCCESS, "sNames": names, "Types": types}

    def _CheckAccess(self, params):
        key = self.find(params["hDefKey"], params["sSubKeyName"])
        if key is None:
            return {"ReturnValue": NOT_FOUND, "bGranted": False}
        return {"ReturnValue": SUCCESS if self.granted else ACCESS_DENIED, "bGranted": self.granted}

    def _get_value(self, params, code, slot):
        key = self.find(params["hDefKey"], params["sSubKeyName"])
        entry = key.values.get(params["sValueName"].lower()) if key else None
        if entry is None or entry[1] != code:
            return {"ReturnValue": NOT_FOUND, slot: None}
        data = entry[2]
        return {"ReturnValue": SUCCESS, slot: tuple(data) if isinstance(data, list) else data}

    def _set_value(self, params, code, slot):
        key = self.find(params["hDefKey"], params["sSubKeyName"])
        if key is None:
            return {"ReturnValue": NOT_FOUND}
        name = params["sValueName"]
        key.values[name.lower()] = (name, code, params[slot])
        return {"ReturnValue": SUCCESS}
