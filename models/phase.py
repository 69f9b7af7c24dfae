"""Resolution phases and the edit context the classifier derives.

Not persisted — a phase is recomputed from UI focus on every call.
"""
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

EditingTarget = Literal["asset", "instance"]

# Sentinel tab name for the asset editor's "common settings" tab
COMMON_TAB = "common"


class ResolutionPhase(str, Enum):
    AUTO = "auto"                    # instance lang > asset lang > common (what renders)
    ASSET_COMMON = "asset_common"    # asset default_settings only
    ASSET_LANG = "asset_lang"        # asset default_language_override, then common
    INSTANCE_LANG = "instance_lang"  # instance override_language_settings, then asset tiers


class EditContext(BaseModel):
    """Phase plus the language under edit (None for ASSET_COMMON)."""

    model_config = ConfigDict(frozen=True)

    phase: ResolutionPhase
    language: str | None = None


# Phases that edit a per-language tier; only these may fall back to AUTO in a preview
LANGUAGE_PHASES = frozenset({ResolutionPhase.ASSET_LANG, ResolutionPhase.INSTANCE_LANG})
