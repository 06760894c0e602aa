"""Tests for device enumeration."""

from unittest.mock import MagicMock

import pytest

from devbridge.adb.client import ADBClient, DeviceQueryError, ProcessError
from devbridge.adb.device import Device, DeviceKind, DeviceManager, device_kind, synthesized_name

DEVICE_LIST = "\n".join([
    "List of devices attached",
    "FA8251A00719 unauthorized usb:338690048X transport_id:5",
    "FA8251A00720 device usb:338690048X product:walleye model:Pixel_2 device:walleye transport_id:4",
    "emulator-5554          device product:sdk_gphone_x86_arm model:sdk_gphone_x86_arm device:generic_x86_arm transport_id:1",
    "",
])

EMULATOR_ONLY = "\n".join([
    "List of devices attached",
    "emulator-5554          device product:sdk_gphone_x86_arm model:sdk_gphone_x86_arm device:generic_x86_arm transport_id:1",
    "",
])


@pytest.fixture
def client():
    client = ADBClient()
    client.run_command = MagicMock(return_value="")
    return client


class TestDeviceKind:
    """Test classification helpers."""

    def test_kind_from_identifier(self):
        assert device_kind("emulator-5554") == DeviceKind.EMULATOR
        assert device_kind("FA8251A00720") == DeviceKind.DEVICE
        assert device_kind("192.168.1.20:5555") == DeviceKind.DEVICE

    def test_synthesized_name(self):
        assert synthesized_name("FA8251A00719") == "Device FA8251A00719"


class TestListDevices:
    """Test listing and enriching devices."""

    def test_lists_in_discovery_order(self, client):
        client.run_command.side_effect = [
            DEVICE_LIST,
            ProcessError("error: no emulator detected"),
            "Pixel_4_XL_API_30\nOK",
        ]

        devices = DeviceManager(client).list_devices()

        assert devices == [
            Device(
                identifier="FA8251A00719",
                display_name="Device FA8251A00719",
                kind=DeviceKind.DEVICE,
                is_authorized=False,
                is_booted=True,
            ),
            Device(
                identifier="FA8251A00720",
                display_name="Pixel_2",
                kind=DeviceKind.DEVICE,
                is_authorized=True,
                is_booted=True,
            ),
            Device(
                identifier="emulator-5554",
                display_name="Pixel_4_XL_API_30",
                kind=DeviceKind.EMULATOR,
                is_authorized=True,
                is_booted=True,
            ),
        ]

    def test_queries_run_sequentially(self, client):
        client.run_command.side_effect = [
            DEVICE_LIST,
            "error: no emulator detected",
            "Pixel_4_XL_API_30\nOK",
        ]

        DeviceManager(client).list_devices()

        calls = [c.args[0] for c in client.run_command.call_args_list]
        assert calls == [
            ["devices", "-l"],
            ["-s", "FA8251A00720", "emu", "avd", "name"],
            ["-s", "emulator-5554", "emu", "avd", "name"],
        ]

    def test_falls_back_to_synthesized_name(self, client):
        client.run_command.side_effect = [
            "List of devices attached\nR58M123ABC device usb:1-1 transport_id:2\n",
            "error: no emulator detected",
        ]

        devices = DeviceManager(client).list_devices()

        assert devices[0].display_name == "Device R58M123ABC"
        assert devices[0].is_authorized

    def test_empty_listing(self, client):
        client.run_command.return_value = "List of devices attached\n\n"

        assert DeviceManager(client).list_devices() == []

    def test_listing_failure_propagates(self, client):
        client.run_command.side_effect = ProcessError("ADB not found")

        with pytest.raises(ProcessError):
            DeviceManager(client).list_devices()


class TestDisplayName:
    """Test emulator name queries."""

    def test_returns_name(self, client):
        client.run_command.return_value = "Pixel_4_XL_API_30\nOK"

        assert DeviceManager(client).get_device_display_name("emulator-5554") == "Pixel_4_XL_API_30"

    def test_connection_refused(self, client):
        client.run_command.return_value = "error: could not connect to TCP port 55534: Connection refused"

        with pytest.raises(DeviceQueryError):
            DeviceManager(client).get_device_display_name("emulator-5554")

    def test_process_error_becomes_query_error(self, client):
        client.run_command.side_effect = ProcessError("exit 1")

        with pytest.raises(DeviceQueryError):
            DeviceManager(client).get_device_display_name("emulator-5554")


class TestIsDeviceBooted:
    """Test looking up a single device."""

    def test_finds_by_name(self, client):
        client.run_command.side_effect = [EMULATOR_ONLY, "Pixel_4_XL_API_30\nOK"]

        device = DeviceManager(client).is_device_booted("Pixel_4_XL_API_30")

        assert device == Device(
            identifier="emulator-5554",
            display_name="Pixel_4_XL_API_30",
            kind=DeviceKind.EMULATOR,
            is_authorized=True,
            is_booted=True,
        )

    def test_finds_by_device(self, client):
        client.run_command.side_effect = [EMULATOR_ONLY, "Pixel_4_XL_API_30\nOK"]
        wanted = Device("emulator-5554", "", DeviceKind.EMULATOR)

        device = DeviceManager(client).is_device_booted(wanted)

        assert device.display_name == "Pixel_4_XL_API_30"

    def test_not_booted(self, client):
        client.run_command.return_value = ""

        assert DeviceManager(client).is_device_booted("Pixel 5") is None

    def test_first_device_without_argument(self, client):
        client.run_command.side_effect = [EMULATOR_ONLY, "Pixel_4_XL_API_30\nOK"]

        assert DeviceManager(client).is_device_booted().identifier == "emulator-5554"
