"""Device identity types carried in backup metadata and file names."""

from __future__ import annotations

import re
import sys
import uuid
from dataclasses import dataclass
from enum import Enum

from .exceptions import FatalError

# Device ids appear verbatim in `_`-delimited backup file names
DEVICE_ID_PATTERN = re.compile(r"[A-Za-z0-9-]+")

# Display name of the device, only ever stored inside backup metadata
DeviceName = str


@dataclass(frozen=True)
class DeviceIdentifier:
    """Stable identifier of one device's backup lineage."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not DEVICE_ID_PATTERN.fullmatch(self.value):
            raise FatalError("Invalid device identifier", value=self.value)

    @classmethod
    def parse(cls, value: str) -> DeviceIdentifier:
        return cls(value)

    @classmethod
    def generate(cls) -> DeviceIdentifier:
        """Create a fresh random identifier for a newly initialised device."""
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.value


class OperatingSystem(str, Enum):
    """Operating system tag, serialized as its lowercase token."""

    IOS = "ios"
    MACOS = "macos"
    ANDROID = "android"
    LINUX = "linux"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> OperatingSystem:
        try:
            return cls(token)
        except ValueError:
            raise FatalError("Unknown operating system", value=token) from None

    @classmethod
    def default(cls) -> OperatingSystem:
        """Detect the host operating system."""
        platform = sys.platform
        if platform == "ios":
            return cls.IOS
        if platform == "darwin":
            return cls.MACOS
        if platform == "android":
            return cls.ANDROID
        if platform.startswith("linux"):
            return cls.LINUX
        if platform in ("win32", "cygwin"):
            return cls.WINDOWS
        raise FatalError("Unsupported host platform", platform=platform)
