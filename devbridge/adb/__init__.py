"""ADB module initialization."""

from .client import ADBClient, BridgeError, DeviceQueryError, LaunchError, ProcessError
from .device import Device, DeviceKind, DeviceManager, device_kind, synthesized_name
from .package import PackageManager
from .parsers import (
    DeviceEntry,
    ErrorClassifier,
    find_error_marker,
    parse_abis,
    parse_device_list,
    parse_emulator_name,
    parse_package_list,
    parse_properties,
    parse_property_value,
)
from .properties import PropertyReader

__all__ = [
    # client
    "ADBClient",
    "BridgeError",
    "DeviceQueryError",
    "LaunchError",
    "ProcessError",
    # device
    "Device",
    "DeviceKind",
    "DeviceManager",
    "device_kind",
    "synthesized_name",
    # package
    "PackageManager",
    # parsers
    "DeviceEntry",
    "ErrorClassifier",
    "find_error_marker",
    "parse_abis",
    "parse_device_list",
    "parse_emulator_name",
    "parse_package_list",
    "parse_properties",
    "parse_property_value",
    # properties
    "PropertyReader",
]
