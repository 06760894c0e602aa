"""
devbridge - Android Debug Bridge device-management client.

Discovers connected devices and emulators, reads their properties and boot
state, and drives application lifecycle operations by parsing the free-form
text that adb prints.
"""

__version__ = "0.1.0"
__author__ = "devbridge Contributors"
