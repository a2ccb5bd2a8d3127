"""Target triple detection for the running platform."""

import platform

from ghbin.exceptions import UnsupportedPlatformError

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

_OS_SUFFIXES = {
    "linux": "unknown-linux-gnu",
    "darwin": "apple-darwin",
    "windows": "pc-windows-msvc",
}


def detect_target_triple(
    machine: str | None = None, system: str | None = None
) -> str:
    """Return the target triple for this machine.

    Args:
        machine: Override for ``platform.machine()``
        system: Override for ``platform.system()``

    Returns:
        Triple such as ``x86_64-unknown-linux-gnu``

    Raises:
        UnsupportedPlatformError: For architectures or systems without a
            known triple

    """
    raw_machine = (machine or platform.machine()).lower()
    raw_system = (system or platform.system()).lower()

    arch = _ARCH_ALIASES.get(raw_machine)
    os_suffix = _OS_SUFFIXES.get(raw_system)
    if arch is None or os_suffix is None:
        msg = f"{raw_machine}-{raw_system}; pass --target explicitly"
        raise UnsupportedPlatformError(msg)
    return f"{arch}-{os_suffix}"


def is_windows_target(target_triple: str) -> bool:
    """Return True if the triple names a Windows target."""
    return "windows" in target_triple
