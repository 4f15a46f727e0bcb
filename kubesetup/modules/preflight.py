"""Operating system precondition check."""
import logging
from pathlib import Path
from typing import Dict

from kubesetup.errors import UnsupportedOSError
from kubesetup.models import OSRelease

logger = logging.getLogger("kubesetup.preflight")


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse ``KEY=value`` lines of an os-release file.

    Blank lines and comments are skipped, surrounding quotes are stripped.
    """
    fields: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        fields[key.strip()] = value
    return fields


def read_os_release(path: Path) -> OSRelease:
    """Load the OS identity from ``path``.

    Raises:
        UnsupportedOSError: If the file does not exist
    """
    if not path.is_file():
        raise UnsupportedOSError("ERROR: Unable to detect OS. Exiting.")
    fields = parse_os_release(path.read_text(encoding='utf-8'))
    return OSRelease(
        id=fields.get('ID', ''),
        version_id=fields.get('VERSION_ID', ''),
        pretty_name=fields.get('PRETTY_NAME', ''),
    )


def check_os(path: Path, os_id: str, version_id: str) -> OSRelease:
    """Ensure the host matches the single supported OS identity and version.

    Args:
        path: Location of the os-release file
        os_id: Required ``ID`` value
        version_id: Required ``VERSION_ID`` value

    Returns:
        The detected OSRelease

    Raises:
        UnsupportedOSError: If the file is missing or the identity differs
    """
    release = read_os_release(path)
    if release.id != os_id or release.version_id != version_id:
        detected = release.pretty_name or f"{release.id} {release.version_id}".strip()
        raise UnsupportedOSError(
            f"ERROR: This script only supports {os_id.capitalize()} {version_id}. "
            f"Detected OS: {detected}"
        )
    logger.debug(f"Detected supported OS: {release.pretty_name}")
    return release
