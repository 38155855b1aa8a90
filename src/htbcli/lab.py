"""Local lab directories and shell exports for a machine."""

import logging
from pathlib import Path

from htbcli.errors import LabPathError
from htbcli.models import Machine

logger = logging.getLogger(__name__)


def ensure_lab_dir(path: Path) -> bool:
    """Create the lab directory for a machine if it does not exist yet.

    Only the last path component is created; the parent must already exist.

    Returns:
        True if the directory was created, False if it was already there.

    Raises:
        LabPathError: If the parent is missing or ``path`` is not a directory.
        OSError: If creating the directory fails for another reason.
    """
    if path.is_dir():
        return False
    if not path.parent.exists():
        raise LabPathError(f"Are you sure {path} is a valid path?")
    if path.exists():
        raise LabPathError(f"{path} already exists but isn't a directory!")

    path.mkdir()
    logger.debug("Created lab directory %s", path)
    return True


def render_exports(machine: Machine, cs_opt: Path | None = None) -> list[str]:
    """Lines for ``eval "$(htb info <name> --eval)"``.

    When ``cs_opt`` prefixes the home path it is written back as ``$CS_OPT``
    so the export stays portable across shells.
    """
    home = str(machine.home)
    if cs_opt is not None:
        home = home.replace(str(cs_opt), "$CS_OPT", 1)
    return [
        f"export MACHINE_ID={machine.id}",
        f"export MACHINE_NAME={machine.name}",
        f"export MACHINE_IP={machine.ip or ''}",
        f'export MACHINE_HOME="{home}"',
    ]
