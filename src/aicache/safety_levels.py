"""Safety tier definitions and level-change warnings."""

from typing import Optional

from pydantic import BaseModel, Field

from aicache.models import SafetyTier


class SafetyDefinition(BaseModel):
    """What a safety tier means to the user."""

    level: SafetyTier
    label: str
    definition: str
    criteria: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    consequence: str


class LevelChangeWarning(BaseModel):
    """Warning shown before a user changes a directory's tier."""

    title: str
    message: str
    requires_confirmation: bool = False


SAFETY_DEFINITIONS: dict[SafetyTier, SafetyDefinition] = {
    SafetyTier.SAFE: SafetyDefinition(
        level=SafetyTier.SAFE,
        label="Safe",
        definition="Regenerable data the tool recreates on demand.",
        criteria=[
            "Caches, logs, telemetry or temporary files",
            "No user-authored content",
            "Tool keeps working after deletion",
        ],
        examples=["debug", "cache", "telemetry", "image-cache", "browser_recordings"],
        consequence="Data is rebuilt automatically; the next start may be slower.",
    ),
    SafetyTier.CAUTION: SafetyDefinition(
        level=SafetyTier.CAUTION,
        label="Caution",
        definition="Data that may hold history or notes you want to keep.",
        criteria=[
            "Conversation or edit history",
            "Per-project state",
            "Not required for the tool to start",
        ],
        examples=["projects", "todos", "file-history", "conversations", "brain"],
        consequence="History, plans or notes are lost permanently.",
    ),
    SafetyTier.DANGER: SafetyDefinition(
        level=SafetyTier.DANGER,
        label="Danger",
        definition="Data the tool needs in order to work.",
        criteria=[
            "Installed plugins, skills or extensions",
            "Configuration and integration settings",
            "Deleting breaks or resets the tool",
        ],
        examples=["plugins", "skills", "ide", "extensions", "config"],
        consequence="The tool may stop working until it is reinstalled or reconfigured.",
    ),
}


def get_safety_tooltip(tier: SafetyTier) -> str:
    """One-paragraph description of a tier for hover text or help output."""
    definition = SAFETY_DEFINITIONS[tier]
    criteria = "\n".join(f"- {c}" for c in definition.criteria)
    return f"{definition.label}: {definition.definition}\n{criteria}\nIf deleted: {definition.consequence}"


def get_level_change_warning(
    current: SafetyTier, new: SafetyTier, dir_name: str
) -> Optional[LevelChangeWarning]:
    """
    Describe the effect of changing a directory's tier.

    Args:
        current: Tier the directory has now
        new: Tier the user wants
        dir_name: Directory name for the message

    Returns:
        None if the tier is unchanged, otherwise a LevelChangeWarning.
        Lowering the tier (making the directory easier to delete) requires
        confirmation.
    """
    if current == new:
        return None

    current_label = SAFETY_DEFINITIONS[current].label
    new_label = SAFETY_DEFINITIONS[new].label

    if new.rank < current.rank:
        return LevelChangeWarning(
            title=f"Lower safety level for '{dir_name}'?",
            message=(
                f"'{dir_name}' is classified as {current_label}. Marking it {new_label} "
                f"makes it easier to delete. {SAFETY_DEFINITIONS[current].consequence}"
            ),
            requires_confirmation=True,
        )

    return LevelChangeWarning(
        title=f"Raise safety level for '{dir_name}'",
        message=f"'{dir_name}' will be treated as {new_label} instead of {current_label}.",
        requires_confirmation=False,
    )
