"""Platform helpers for wmiregistry."""
