"""Parsers for the text that adb prints.

adb has no structured output format. Everything here works on conventions
(column layout, bracketed property pairs, error wording) and never raises on
malformed data: unparseable lines are dropped. The only parser that fails is
``parse_emulator_name``, because an error-shaped answer to a name query is
a query failure rather than a name.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .client import DeviceQueryError

DEVICE_LIST_HEADER = "List of devices attached"
AUTHORIZED_STATUS = "device"
UNAUTHORIZED_STATUS = "unauthorized"

PROPERTY_LINE = re.compile(r"^\[(?P<key>[^\]]+)\]: \[(?P<value>.*)\]$")


@dataclass
class DeviceEntry:
    """One line of ``adb devices -l`` output."""

    identifier: str
    status: str
    details: Dict[str, str] = field(default_factory=dict)

    @property
    def is_authorized(self) -> bool:
        return self.status == AUTHORIZED_STATUS


def parse_device_list(output: str) -> List[DeviceEntry]:
    """Parse ``adb devices -l`` output, keeping discovery order."""
    entries = []

    for line in output.splitlines():
        line = line.strip()
        # daemon start-up chatter is prefixed with '*'
        if not line or line.startswith(DEVICE_LIST_HEADER) or line.startswith("*"):
            continue

        parts = line.split()
        if len(parts) < 2:
            continue

        details = {}
        for token in parts[2:]:
            key, sep, value = token.partition(":")
            if sep and key:
                details[key] = value

        entries.append(DeviceEntry(identifier=parts[0], status=parts[1], details=details))

    return entries


def parse_properties(output: str) -> Dict[str, str]:
    """Parse ``getprop`` output of ``[key]: [value]`` lines."""
    properties = {}

    for line in output.splitlines():
        match = PROPERTY_LINE.match(line.strip())
        if match:
            properties[match.group("key")] = match.group("value")

    return properties


def parse_property_value(output: str, key: str) -> Optional[str]:
    """Extract a single property from ``getprop`` or ``getprop <key>`` output.

    A full dump is searched for ``key``. When no bracketed line is present the
    output is taken as the bare value printed by ``getprop <key>``.
    """
    properties = parse_properties(output)
    if properties:
        return properties.get(key)

    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if len(lines) == 1 and not lines[0].startswith("["):
        return lines[0]
    return None


def parse_abis(output: str) -> List[str]:
    """Parse a comma separated ABI list, keeping preference order."""
    for line in output.splitlines():
        if line.strip():
            return [abi.strip() for abi in line.split(",") if abi.strip()]
    return []


def parse_package_list(output: str) -> List[str]:
    """Parse ``pm list packages`` output into package names."""
    packages = []

    for line in output.splitlines():
        line = line.strip()
        if line.startswith("package:"):
            name = line[len("package:"):].strip()
            if name:
                packages.append(name)

    return packages


class ErrorClassifier:
    """Find the error message in the output of one family of commands.

    A line is an error when it starts with one of ``prefixes`` (case-sensitive)
    or contains one of ``phrases``. The reason returned runs from the start of
    the first error line to the end of the output. Wording outside these lists
    is not recognized and the output counts as a success.
    """

    def __init__(self, prefixes: Iterable[str], phrases: Iterable[str]) -> None:
        self.prefixes = tuple(prefixes)
        self.phrases = tuple(phrases)

    def _is_error_line(self, line: str) -> bool:
        return line.startswith(self.prefixes) or any(phrase in line for phrase in self.phrases)

    def classify(self, output: str) -> Optional[str]:
        """Return the failure reason, or None when the output looks successful."""
        lines = output.strip().splitlines()

        for index, line in enumerate(lines):
            if self._is_error_line(line.strip()):
                reason = "\n".join(lines[index:]).strip()
                # am prints "Starting: Intent {...}" ahead of the message
                start = reason.find("Error")
                return reason[start:] if start > 0 else reason

        return None


# am start / monkey
LAUNCH_ERRORS = ErrorClassifier(
    prefixes=["Error"],
    phrases=[
        "unable to resolve Intent",
        "does not exist",
        "No activities found to run",
    ],
)

# emu avd name and other per-device queries
QUERY_ERRORS = ErrorClassifier(
    prefixes=["Error", "error:"],
    phrases=[
        "could not connect to TCP port",
        "no emulator detected",
        "device offline",
        "device unauthorized",
        "not found",
        "KO:",
    ],
)


def find_error_marker(output: str) -> Optional[str]:
    """Classify launch command output; returns the reason or None."""
    return LAUNCH_ERRORS.classify(output)


def parse_emulator_name(output: str) -> str:
    """Parse the answer to ``emu avd name``.

    The emulator console prints the AVD name followed by an ``OK`` line.

    Raises:
        DeviceQueryError: If the output is empty or error-shaped
    """
    reason = QUERY_ERRORS.classify(output)
    if reason is not None:
        raise DeviceQueryError(reason)

    lines = [line.strip() for line in output.strip().splitlines()]
    if not lines or not lines[0] or lines[0] == "OK":
        raise DeviceQueryError("Emulator name query returned no name")

    return lines[0]
