"""Named API operations.

Each operation sends a single request and reads the envelope by key
presence: ``info`` for reads, ``message`` with an exact literal for
actions. Anything else becomes an ``ApiError`` whose text is the
pretty-printed envelope. No retries, no pagination.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from htbcli.client import HtbClient
from htbcli.config import get_settings
from htbcli.errors import ApiError
from htbcli.models import Difficulty, Machine, OperatingSystem

logger = logging.getLogger(__name__)

MACHINE_PAGE_URL = "https://app.hackthebox.com/machines"

PLAYING_MESSAGE = "Playing machine."
STOPPED_MESSAGE = "Stopped playing machine."


def _lab_root(lab_root: Path | None) -> Path:
    return lab_root if lab_root is not None else get_settings().require_cs_opt()


def _has(envelope: Any, key: str) -> bool:
    return isinstance(envelope, dict) and key in envelope


def _expect_message(envelope: Any, expected: str) -> None:
    if not (_has(envelope, "message") and envelope["message"] == expected):
        raise ApiError(envelope)


def get_machines(client: HtbClient, *, lab_root: Path | None = None) -> list[Machine]:
    """Fetch the playable machine list."""
    envelope = client.get("machine", "list")
    if not _has(envelope, "info"):
        raise ApiError(envelope)

    root = _lab_root(lab_root)
    info = envelope["info"]
    if isinstance(info, list):
        machines = [Machine.from_api(item, root) for item in info]
    else:
        machines = [Machine.from_api(info, root)]
    logger.debug("Fetched %d machines", len(machines))
    return machines


def get_machine(
    client: HtbClient, name: str, *, lab_root: Path | None = None
) -> Machine:
    """Fetch one machine's profile by name.

    Raises:
        ApiError: With the API's own text when the envelope has ``message``.
    """
    envelope = client.get("machine", "profile", name)
    if _has(envelope, "message"):
        raise ApiError(envelope, message=str(envelope["message"]))
    if _has(envelope, "info"):
        return Machine.from_api(envelope["info"], _lab_root(lab_root))
    raise ApiError(envelope)


def join_machine(client: HtbClient, machine: Machine) -> None:
    """Spawn ``machine`` for the current user."""
    envelope = client.post("machine", "play", str(machine.id))
    _expect_message(envelope, PLAYING_MESSAGE)
    logger.info("Joined machine %s (#%d)", machine.name, machine.id)


def leave_machine(client: HtbClient) -> str | None:
    """Stop the active machine.

    Returns:
        The name of the machine left, or None if nothing was active.
    """
    active = client.get("machine", "active")
    if not _has(active, "info"):
        raise ApiError(active)
    if active["info"] is None:
        return None

    info = active["info"]
    name = str(info.get("name", "")) if isinstance(info, dict) else ""

    envelope = client.post("machine", "stop")
    _expect_message(envelope, STOPPED_MESSAGE)
    logger.info("Left machine %s", name)
    return name


def own_machine(client: HtbClient, machine: Machine, flag: str, difficulty: int) -> str:
    """Submit a flag with a 1-100 difficulty rating.

    Returns:
        The API's message, which names the machine and the flag owned.
    """
    if not 1 <= difficulty <= 100:
        raise ValueError(f"difficulty must be between 1 and 100, got {difficulty}")

    body = {"flag": flag, "id": machine.id, "difficulty": difficulty}
    envelope = client.post("machine", "own", body=body)
    if not _has(envelope, "message") or envelope.get("success") is False:
        raise ApiError(envelope)
    return str(envelope["message"])


def filter_machines(
    machines: Iterable[Machine],
    *,
    os: OperatingSystem | None = None,
    difficulty: Difficulty | None = None,
) -> list[Machine]:
    """Keep machines matching every given filter, in input order."""
    return [
        m
        for m in machines
        if (os is None or m.os == os)
        and (difficulty is None or m.difficulty == difficulty)
    ]


def sanitize_name(raw: str) -> str:
    """Strip everything but alphanumerics from a user-supplied machine name."""
    name = "".join(c for c in raw if c.isalnum())
    if not name:
        raise ValueError("Invalid input after sanitation.")
    return name


def machine_page(machine: Machine) -> str:
    return f"{MACHINE_PAGE_URL}/{machine.id}"
