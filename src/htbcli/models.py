"""Machine model parsed from API responses.

The key pattern is:
1. Enums mirror the exact strings the API sends (``os``, ``difficultyText``)
2. ``Machine`` is frozen and built only through ``Machine.from_api``
3. The local lab path is derived at parse time from the CS_OPT root
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class OperatingSystem(str, Enum):
    """Operating systems a lab machine can run."""

    LINUX = "Linux"
    WINDOWS = "Windows"


class Difficulty(str, Enum):
    """Difficulty ratings; the API's "Very Easy" maps to ``VERY_EASY``."""

    VERY_EASY = "VeryEasy"
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    INSANE = "Insane"


def lab_home(lab_root: Path, name: str) -> Path:
    """Notes folder for a machine: ``<lab_root>/htb/lab/<name lowercased>``."""
    return Path(lab_root) / "htb" / "lab" / name.lower()


class Machine(BaseModel):
    """A lab machine as returned by ``machine/list`` or ``machine/profile``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(strict=True, ge=0, description="Numeric machine id")
    name: str = Field(min_length=1, description="Display name")
    os: OperatingSystem = Field(description="Operating system")
    difficulty: Difficulty = Field(
        validation_alias=AliasChoices("difficultyText", "difficulty"),
        description="Difficulty rating",
    )
    ip: str | None = Field(default=None, description="Address once spawned")
    home: Path = Field(description="Local lab directory for notes")

    @model_validator(mode="before")
    @classmethod
    def derive_home(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        # home is never taken from the payload
        data = {k: v for k, v in data.items() if k != "home"}
        lab_root = (info.context or {}).get("lab_root")
        name = data.get("name")
        if lab_root is None or not isinstance(name, str):
            return data
        return {**data, "home": lab_home(lab_root, name)}

    @field_validator("difficulty", mode="before")
    @classmethod
    def api_spelling(cls, value: Any) -> Any:
        if value == "Very Easy":
            return Difficulty.VERY_EASY
        return value

    @classmethod
    def from_api(cls, info: Any, lab_root: Path) -> "Machine":
        """Validate one machine object from a response envelope.

        Raises:
            pydantic.ValidationError: On missing fields or unknown enum strings.
        """
        return cls.model_validate(info, context={"lab_root": lab_root})
