"""Tests for key-level command dispatch."""
import unittest

from fake_provider import FakeStdRegProv

from wmiregistry.errors import InvalidResponseError, NotConnectedError
from wmiregistry.models import RegCommand, RegistryHive
from wmiregistry.services.command_dispatcher import CommandDispatcher, succeeded


class TestCommandDispatcher(unittest.TestCase):
    def setUp(self):
        self.provider = FakeStdRegProv()
        self.dispatcher = CommandDispatcher(self.provider)

    def test_execute_uses_command_name_and_key_params(self):
        self.dispatcher.execute(RegistryHive.LocalMachine, r"SOFTWARE\Acme", RegCommand.CreateKey)
        method, params = self.provider.calls[-1]
        self.assertEqual(method, "CreateKey")
        self.assertEqual(params, {"hDefKey": 0x80000002, "sSubKeyName": r"SOFTWARE\Acme"})

    def test_required_mask_attached_when_non_zero(self):
        self.dispatcher.execute(RegistryHive.CurrentUser, "SOFTWARE", RegCommand.CheckAccess, 0x20000)
        _, params = self.provider.calls[-1]
        self.assertEqual(params["uRequired"], 0x20000)

    def test_zero_mask_not_attached(self):
        self.dispatcher.execute(RegistryHive.CurrentUser, "SOFTWARE", RegCommand.CheckAccess, 0)
        _, params = self.provider.calls[-1]
        self.assertNotIn("uRequired", params)

    def test_not_connected_makes_no_call(self):
        self.provider.disconnect()
        for command in RegCommand:
            with self.assertRaises(NotConnectedError):
                self.dispatcher.execute(RegistryHive.CurrentUser, "SOFTWARE", command)
        self.assertEqual(self.provider.calls, [])

    def test_missing_response_is_invalid(self):
        self.provider.responses["EnumKey"] = None
        with self.assertRaises(InvalidResponseError):
            self.dispatcher.execute(RegistryHive.CurrentUser, "SOFTWARE", RegCommand.EnumKey)

    def test_returns_raw_response(self):
        self.provider.responses["DeleteKey"] = {"ReturnValue": 2}
        response = self.dispatcher.execute(RegistryHive.Users, "Missing", RegCommand.DeleteKey)
        self.assertEqual(response, {"ReturnValue": 2})


class TestSucceeded(unittest.TestCase):
    def test_zero_is_success(self):
        self.assertTrue(succeeded({"ReturnValue": 0}))

    def test_non_zero_is_failure(self):
        self.assertFalse(succeeded({"ReturnValue": 2}))
        self.assertFalse(succeeded({"ReturnValue": 5}))

    def test_missing_return_value_is_failure(self):
        self.assertFalse(succeeded({}))


if __name__ == "__main__":
    unittest.main()
