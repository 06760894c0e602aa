"""ADB package and app launch utilities."""

from typing import List

from .client import ADBClient, LaunchError
from .device import DeviceRef
from .parsers import find_error_marker, parse_package_list
from ..util.logging import get_logger

logger = get_logger(__name__)

ACTION_RUN = "android.intent.action.RUN"
ACTION_VIEW = "android.intent.action.VIEW"
CATEGORY_LAUNCHER = "android.intent.category.LAUNCHER"
# Intent.FLAG_ACTIVITY_SINGLE_TOP
FLAG_ACTIVITY_SINGLE_TOP = "0x20000000"


class PackageManager:
    """Package queries and app launching on a device."""

    def __init__(self, client: ADBClient):
        self.client = client

    def _shell(self, device: DeviceRef, *args: str) -> str:
        return self.client.run_command(self.client.device_args(device, "shell", *args))

    def is_package_installed(self, device: DeviceRef, package_id: str) -> bool:
        """Check if a package is installed.

        ``pm list packages <filter>`` prints a ``package:`` line for every
        match and nothing otherwise.
        """
        output = self._shell(device, "pm", "list", "packages", package_id)
        return any(line.strip() for line in output.strip().splitlines())

    def list_packages(self, device: DeviceRef) -> List[str]:
        """List installed packages."""
        packages = parse_package_list(self._shell(device, "pm", "list", "packages"))
        logger.debug(f"Found {len(packages)} packages")
        return sorted(packages)

    def _start(self, device: DeviceRef, *args: str) -> str:
        output = self._shell(device, *args)
        reason = find_error_marker(output)
        if reason is not None:
            logger.error(f"Launch failed: {reason}")
            raise LaunchError(reason)
        return output

    def launch_activity(self, device: DeviceRef, activity_id: str) -> None:
        """Start an activity given as ``<package>/<activity>``.

        Raises:
            LaunchError: If the activity does not exist or cannot start
        """
        self._start(
            device,
            "am", "start",
            "-a", ACTION_RUN,
            "-f", FLAG_ACTIVITY_SINGLE_TOP,
            "-n", activity_id,
        )

    def open_app(self, device: DeviceRef, app_id: str) -> None:
        """Open the launcher activity of an application.

        Raises:
            LaunchError: If the app is not installed or has no launcher activity
        """
        self._start(device, "monkey", "-p", app_id, "-c", CATEGORY_LAUNCHER, "1")

    def open_url(self, device: DeviceRef, url: str) -> None:
        """Open a URL with whichever app handles it.

        Raises:
            LaunchError: If no activity can handle the URL
        """
        self._start(device, "am", "start", "-a", ACTION_VIEW, "-d", url)
