"""macOS privacy permission checks (screen recording, accessibility)."""

import ctypes
import ctypes.util
import sys
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

SCREEN_RECORDING_SETTINGS_URL = "x-apple.systempreferences:com.apple.preference.security?Privacy_ScreenCapture"
ACCESSIBILITY_SETTINGS_URL = "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"
NOTIFICATION_SETTINGS_URL = "x-apple.systempreferences:com.apple.preference.notifications"


@dataclass(frozen=True)
class PermissionSnapshot:
    screen_recording: bool
    accessibility: bool
    notifications: bool = True


PermissionChecker = Callable[[], PermissionSnapshot]


def _call_bool(framework: str, symbol: str) -> bool:
    """Call a no-argument boolean C function from a system framework."""
    path = ctypes.util.find_library(framework)
    if not path:
        logger.warning(f"{framework} framework not found; treating {symbol} as denied")
        return False
    try:
        func = getattr(ctypes.cdll.LoadLibrary(path), symbol)
    except (OSError, AttributeError) as e:
        logger.warning(f"Could not load {symbol} from {framework}: {e}")
        return False
    func.restype = ctypes.c_bool
    func.argtypes = []
    return bool(func())


def check_system_permissions() -> PermissionSnapshot:
    """Query the OS for the permissions the agent needs.

    Only macOS gates screen capture and input control behind privacy
    prompts; elsewhere both are reported as granted. Notification
    permission is not queried and is always reported as granted.
    """
    if sys.platform != "darwin":
        logger.debug(f"Permission checks not applicable on {sys.platform}")
        return PermissionSnapshot(screen_recording=True, accessibility=True)

    snapshot = PermissionSnapshot(
        screen_recording=_call_bool("CoreGraphics", "CGPreflightScreenCaptureAccess"),
        accessibility=_call_bool("ApplicationServices", "AXIsProcessTrusted"),
    )
    logger.debug(f"Permission snapshot: {snapshot}")
    return snapshot
