"""ADB device discovery and classification."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .client import ADBClient, DeviceQueryError, ProcessError
from .parsers import UNAUTHORIZED_STATUS, DeviceEntry, parse_device_list, parse_emulator_name
from ..util.logging import get_logger

logger = get_logger(__name__)

EMULATOR_PREFIX = "emulator-"


class DeviceKind(str, Enum):
    """Whether a connected unit is hardware or an emulator."""

    DEVICE = "device"
    EMULATOR = "emulator"


def device_kind(identifier: str) -> DeviceKind:
    """Classify a device from its adb identifier."""
    if identifier.startswith(EMULATOR_PREFIX):
        return DeviceKind.EMULATOR
    return DeviceKind.DEVICE


def synthesized_name(identifier: str) -> str:
    """Fallback display name for devices that cannot report one."""
    return f"Device {identifier}"


@dataclass
class Device:
    """A device or emulator known to the adb server."""

    identifier: str
    display_name: str
    kind: DeviceKind
    is_authorized: bool = True
    is_booted: bool = True

    @property
    def is_emulator(self) -> bool:
        return self.kind == DeviceKind.EMULATOR


DeviceRef = Union[Device, str]


def _identifier_of(device: DeviceRef) -> str:
    return device.identifier if isinstance(device, Device) else device


class DeviceManager:
    """Lists connected devices and resolves their display names."""

    def __init__(self, client: ADBClient):
        self.client = client

    def get_device_display_name(self, device: DeviceRef) -> str:
        """Ask the emulator console for the AVD name of a device.

        Raises:
            DeviceQueryError: If the query fails or answers with an error
        """
        identifier = _identifier_of(device)
        try:
            output = self.client.run_command(
                self.client.device_args(identifier, "emu", "avd", "name")
            )
        except ProcessError as e:
            raise DeviceQueryError(f"Could not query name of {identifier}: {e}") from e

        return parse_emulator_name(output)

    def _resolve_name(self, entry: DeviceEntry) -> str:
        # Unauthorized devices can't answer follow-up queries reliably
        if not entry.is_authorized:
            return synthesized_name(entry.identifier)

        try:
            return self.get_device_display_name(entry.identifier)
        except DeviceQueryError as e:
            logger.debug(f"Name query failed for {entry.identifier}: {e}")

        model = entry.details.get("model")
        return model or synthesized_name(entry.identifier)

    def list_devices(self) -> List[Device]:
        """List every device in ``adb devices -l``, in discovery order.

        Name queries run one at a time; the adb server serializes commands and
        the result order must match the listing.
        """
        output = self.client.run_command(["devices", "-l"])
        entries = parse_device_list(output)

        devices = []
        for entry in entries:
            if entry.status == UNAUTHORIZED_STATUS:
                logger.warning(
                    f"Device {entry.identifier} is unauthorized; "
                    "accept the USB debugging prompt on the device"
                )
            elif not entry.is_authorized:
                logger.debug(f"Device {entry.identifier} is {entry.status}")

            devices.append(Device(
                identifier=entry.identifier,
                display_name=self._resolve_name(entry),
                kind=device_kind(entry.identifier),
                is_authorized=entry.is_authorized,
                is_booted=True,
            ))

        logger.debug(f"Found {len(devices)} devices")
        return devices

    def is_device_booted(self, device: Optional[DeviceRef] = None) -> Optional[Device]:
        """Return the listed device matching ``device``, or None if absent.

        A string matches either the identifier or the display name. Without an
        argument the first listed device is returned.
        """
        devices = self.list_devices()

        if device is None:
            return devices[0] if devices else None

        if isinstance(device, Device):
            keys = {key for key in (device.identifier, device.display_name) if key}
        else:
            keys = {device}

        for candidate in devices:
            if candidate.identifier in keys or candidate.display_name in keys:
                return candidate

        return None
