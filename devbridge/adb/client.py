"""ADB client wrapper for device communication."""

import subprocess
import threading
import typing as t

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..util.logging import get_logger

logger = get_logger(__name__)


class BridgeError(Exception):
    """Base class for device bridge errors."""
    pass


class ProcessError(BridgeError):
    """The adb process could not be run or exited with a failure status."""
    pass


class DeviceQueryError(BridgeError):
    """A device query failed or answered with an error message."""
    pass


class LaunchError(BridgeError):
    """An activity or app launch was rejected by the device."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ADBClient:
    """Serialized access to the adb binary.

    The adb server multiplexes every command over one channel, so a client
    only ever has a single process in flight. Callers sharing one client
    from several threads are queued on an internal lock.
    """

    def __init__(self, adb_path: str = "adb", timeout: int = 30, retries: int = 3) -> None:
        """Initialize ADB client.

        Args:
            adb_path: Path to adb executable
            timeout: Command timeout in seconds
            retries: Attempts made when a command times out
        """
        self.adb_path = adb_path
        self.timeout = timeout
        self.retries = max(1, retries)
        self._lock = threading.Lock()

    @staticmethod
    def device_args(device: t.Optional[t.Any], *args: str) -> t.List[str]:
        """Prefix args with ``-s <identifier>`` when a device is given.

        Args:
            device: A ``Device``, an identifier string or None
            args: Command arguments

        Returns:
            Full argument vector
        """
        identifier = getattr(device, "identifier", device)
        prefix = ["-s", identifier] if identifier else []
        return prefix + list(args)

    def _execute(self, args: t.List[str]) -> subprocess.CompletedProcess:
        cmd = [self.adb_path] + args
        logger.debug(f"Running ADB command: {' '.join(cmd)}")
        with self._lock:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )

    def _run(self, args: t.List[str]) -> subprocess.CompletedProcess:
        """Run a command, retrying only on timeouts.

        Raises:
            ProcessError: If adb is missing, keeps timing out or exits non-zero
        """
        try:
            for attempt in Retrying(
                retry=retry_if_exception_type(subprocess.TimeoutExpired),
                stop=stop_after_attempt(self.retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                reraise=True,
            ):
                with attempt:
                    result = self._execute(args)
        except subprocess.TimeoutExpired as e:
            error_msg = f"ADB command timed out after {self.timeout}s: {' '.join(args)}"
            logger.error(error_msg)
            raise ProcessError(error_msg) from e
        except FileNotFoundError as e:
            raise ProcessError("ADB not found. Please install Android platform tools.") from e
        except OSError as e:
            raise ProcessError(f"ADB could not be started: {e}") from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            error_msg = f"ADB command failed ({result.returncode}): {' '.join(args)}\n{output}"
            logger.error(error_msg)
            raise ProcessError(error_msg)

        return result

    def run_command(self, args: t.List[str]) -> str:
        """Run ADB command and return its combined output.

        Args:
            args: Command arguments

        Returns:
            stdout followed by stderr, stripped

        Raises:
            ProcessError: If the command cannot run or fails
        """
        result = self._run(args)
        output = result.stdout or ""
        if result.stderr:
            output = f"{output}\n{result.stderr}" if output else result.stderr
        return output.strip()

    def get_file_output(self, args: t.List[str], device: t.Optional[t.Any] = None) -> str:
        """Run a command through ``exec-out`` and return its raw stdout.

        Args:
            args: Device-side command
            device: Target device, or None for the default device

        Returns:
            Unmodified stdout text
        """
        result = self._run(self.device_args(device, "exec-out", *args))
        return result.stdout or ""

    def read_remote_file(self, path: str, device: t.Optional[t.Any] = None) -> str:
        """Read a small text file from the device filesystem.

        Args:
            path: Remote file path
            device: Target device, or None for the default device

        Returns:
            File contents
        """
        return self.get_file_output(["cat", path], device)

    def is_available(self) -> bool:
        """Check if ADB is available and working."""
        try:
            self.run_command(["version"])
            return True
        except ProcessError:
            return False
