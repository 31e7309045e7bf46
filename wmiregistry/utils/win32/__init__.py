"""Win32 COM helpers for wmiregistry.

Submodules:
    wmi - StdRegProv session over WMI COM
"""
from wmiregistry.utils.win32.wmi import ConnectionOptions, ProviderSession, WmiSession
