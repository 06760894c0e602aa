"""Device property and boot state queries."""

from typing import Dict, List, Optional

from tenacity import RetryError, Retrying, retry_if_result, stop_after_delay, wait_fixed

from .client import ADBClient, DeviceQueryError, ProcessError
from .device import DeviceRef
from .parsers import parse_abis, parse_properties, parse_property_value
from ..util.logging import get_logger

logger = get_logger(__name__)

PROP_BOOT_ANIMATION_STATE = "init.svc.bootanim"
PROP_CPU_ABI_LIST = "ro.product.cpu.abilist"

BOOT_ANIMATION_STOPPED = "stopped"


class PropertyReader:
    """Reads ``getprop`` values from a device."""

    def __init__(self, client: ADBClient):
        self.client = client

    def _getprop(self, device: Optional[DeviceRef], *names: str) -> str:
        try:
            return self.client.get_file_output(["getprop", *names], device)
        except ProcessError as e:
            target = getattr(device, "identifier", device) or "default device"
            raise DeviceQueryError(f"Failed to read properties from {target}: {e}") from e

    def get_properties(self, device: DeviceRef) -> Dict[str, str]:
        """Get every property of a device.

        Lines that are not ``[key]: [value]`` pairs are skipped.

        Raises:
            DeviceQueryError: If the property dump cannot be read
        """
        properties = parse_properties(self._getprop(device))
        logger.debug(f"Read {len(properties)} properties")
        return properties

    def get_property(self, device: Optional[DeviceRef], name: str) -> Optional[str]:
        """Get one property, or None when it is unset."""
        value = parse_property_value(self._getprop(device, name), name)
        return value or None

    def is_boot_animation_complete(self, device: Optional[DeviceRef] = None) -> bool:
        """Check whether the boot animation has stopped.

        Used for polling during boot, so every failure reads as "not yet":
        read errors, a missing property and unexpected output all give False.
        """
        try:
            value = self.get_property(device, PROP_BOOT_ANIMATION_STATE)
        except Exception as e:
            logger.debug(f"Boot animation state unavailable: {e!r}")
            return False

        return value == BOOT_ANIMATION_STOPPED

    def get_device_abis(self, device: DeviceRef) -> List[str]:
        """Get the supported ABIs in the device's preference order."""
        value = self.get_property(device, PROP_CPU_ABI_LIST)
        return parse_abis(value or "")

    def wait_for_boot(
        self,
        device: Optional[DeviceRef] = None,
        timeout: float = 120,
        interval: float = 1,
    ) -> None:
        """Poll until the boot animation stops.

        Raises:
            DeviceQueryError: If the device has not booted within ``timeout``
        """
        try:
            retrying = Retrying(
                retry=retry_if_result(lambda complete: not complete),
                stop=stop_after_delay(timeout),
                wait=wait_fixed(interval),
            )
            retrying(self.is_boot_animation_complete, device)
        except RetryError as e:
            raise DeviceQueryError(f"Device did not finish booting within {timeout}s") from e

        logger.info("Boot animation complete")
