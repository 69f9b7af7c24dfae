"""Cascade Writer — route field updates into the tier the phase edits.

A call carries any number of field updates (e.g. pos_x and pos_y from one
drag). They are processed in two steps:

  1. stage   — classify every field, route it to its tier and build the new
               tier objects / override maps off to the side. Validation
               happens here; any error leaves the store untouched.
  2. commit  — assign each touched attribute once.

Both steps run inside one hold of the asset's store lock.

Routing (the tier comes from the shared phase → tier table):

  ASSET_COMMON   settings → default_settings      text → default_text
                 context  → default_context
  ASSET_LANG     settings → default_language_override[lang]
                 text     → default_text_override[lang]
                 context  → rejected (no per-language asset tier)
  INSTANCE_LANG  settings → override_language_settings[lang]
                 text     → multilingual_text[lang]
                 context  → override_context
  AUTO           read-only

None or "" deletes an override; the touched map is cleaned up after every
write so empty entries and empty maps never survive.
"""
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from cascade.errors import (
    CascadeError,
    MissingCommonDefaultError,
    MissingInstanceError,
    PhaseError,
    UnknownFieldError,
)
from cascade.resolver import inherited_setting
from cascade.store_lock import store_lock
from cascade.tiers import Tier, write_tier
from models.instance import TextAssetInstance
from models.language_settings import CommonSettings, SettingField
from models.phase import ResolutionPhase
from models.project import Page
from models.text_asset import TextAsset
from settings import Settings
from utils.override_maps import (
    drop_language,
    is_empty_value,
    update_settings_map,
    update_text_map,
)

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    ASSET_IDENTITY = "asset_identity"  # name, base text, base context
    SETTING = "setting"                # scalar property set
    INSTANCE_ONLY = "instance_only"    # page text, page context, override membership


# Every writable field must appear here; classify_field rejects anything else.
FIELD_KINDS: dict[str, FieldKind] = {
    "name": FieldKind.ASSET_IDENTITY,
    "text": FieldKind.ASSET_IDENTITY,
    "context": FieldKind.ASSET_IDENTITY,
    **{field.value: FieldKind.SETTING for field in SettingField},
    "multilingual_text": FieldKind.INSTANCE_ONLY,
    "override_context": FieldKind.INSTANCE_ONLY,
    "override_language": FieldKind.INSTANCE_ONLY,
}


def classify_field(field: str) -> FieldKind:
    try:
        return FIELD_KINDS[field]
    except KeyError:
        raise UnknownFieldError(field) from None


class WriteResult(BaseModel):
    applied: list[str] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def apply_updates(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    phase: ResolutionPhase,
    language: str | None,
    updates: Mapping[str, Any],
    settings: Settings | None = None,
) -> WriteResult:
    """Write `updates` into the tier `phase` edits, as one state transition.

    With `settings.strict_writes` (the default) programmer errors (unknown
    field, wrong phase, clearing a common default) and validation errors
    propagate. Otherwise they are logged and reported in the result; the
    store stays unchanged. Staging reads the current tiers, so it runs under
    the same lock hold as the commit.
    """
    strict = settings.strict_writes if settings is not None else True
    with store_lock(asset):
        try:
            staged = _stage(asset, instance, ResolutionPhase(phase), language, updates)
        except (ValueError, TypeError) as exc:
            if strict:
                raise
            logger.error("Rejected write to %s (phase=%s, language=%s): %s", asset.id, phase, language, exc)
            return WriteResult(error=str(exc))
        _commit(asset, instance, staged)
    return WriteResult(applied=list(updates))


# ---------------------------------------------------------------------------
# Staging
# ---------------------------------------------------------------------------

class _StagedWrite:
    """New attribute values for the asset and instance, not yet committed."""

    def __init__(self, asset: TextAsset, instance: TextAssetInstance | None):
        self.asset = asset
        self.instance = instance
        self.asset_attrs: dict[str, Any] = {}
        self.instance_attrs: dict[str, Any] = {}

    def asset_value(self, attr: str) -> Any:
        if attr in self.asset_attrs:
            return self.asset_attrs[attr]
        return getattr(self.asset, attr)

    def instance_value(self, attr: str) -> Any:
        if attr in self.instance_attrs:
            return self.instance_attrs[attr]
        return getattr(self.instance, attr)


def _stage(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    phase: ResolutionPhase,
    language: str | None,
    updates: Mapping[str, Any],
) -> _StagedWrite:
    tier = write_tier(phase).tier
    if tier is not Tier.COMMON and not language:
        raise PhaseError(f"{phase.value} writes need a language")
    if tier is Tier.INSTANCE_LANG and instance is None:
        raise MissingInstanceError(f"{phase.value} write to asset {asset.id!r} without an instance")

    staged = _StagedWrite(asset, instance)
    setting_updates: dict[str, Any] = {}
    membership: bool | None = None

    for field, value in updates.items():
        kind = classify_field(field)
        if kind is FieldKind.SETTING:
            setting_updates[field] = value
        elif kind is FieldKind.ASSET_IDENTITY:
            _stage_identity(staged, tier, language, field, value)
        else:
            if tier is not Tier.INSTANCE_LANG:
                raise PhaseError(f"{field!r} can only be written while editing an instance")
            if field == "override_language":
                if not isinstance(value, bool):
                    raise CascadeError(f"override_language must be a bool, got {value!r}")
                membership = value
            elif field == "multilingual_text":
                _stage_text(staged, tier, language, value)
            else:
                _stage_context(staged, tier, value)

    # Membership first so explicit setting updates in the same call win over the seed
    if membership is not None:
        _stage_membership(staged, language, membership)
    if setting_updates:
        _stage_settings(staged, tier, language, setting_updates)
    return staged


def _stage_identity(staged: _StagedWrite, tier: Tier, language: str | None, field: str, value: Any) -> None:
    if field == "name":
        if tier is Tier.INSTANCE_LANG:
            raise PhaseError("The asset name cannot be changed while editing an instance")
        if not isinstance(value, str) or not value:
            raise CascadeError(f"Asset name must be a non-empty string, got {value!r}")
        staged.asset_attrs["name"] = value
    elif field == "text":
        _stage_text(staged, tier, language, value)
    else:
        _stage_context(staged, tier, value)


def _require_text(field: str, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise CascadeError(f"{field} must be a string, got {type(value).__name__}")


def _stage_text(staged: _StagedWrite, tier: Tier, language: str | None, value: Any) -> None:
    _require_text("text", value)
    if tier is Tier.COMMON:
        if value is None:
            raise MissingCommonDefaultError("text")
        staged.asset_attrs["default_text"] = value
    elif tier is Tier.ASSET_LANG:
        staged.asset_attrs["default_text_override"] = update_text_map(
            staged.asset_value("default_text_override"), language, value
        )
    else:
        staged.instance_attrs["multilingual_text"] = update_text_map(
            staged.instance_value("multilingual_text"), language, value
        )


def _stage_context(staged: _StagedWrite, tier: Tier, value: Any) -> None:
    _require_text("context", value)
    if tier is Tier.COMMON:
        if value is None:
            raise MissingCommonDefaultError("context")
        staged.asset_attrs["default_context"] = value
    elif tier is Tier.ASSET_LANG:
        raise PhaseError("Context has no per-language asset tier")
    else:
        staged.instance_attrs["override_context"] = None if is_empty_value(value) else value


def _stage_membership(staged: _StagedWrite, language: str, enabled: bool) -> None:
    current = staged.instance_value("override_language_settings")
    if not enabled:
        staged.instance_attrs["override_language_settings"] = drop_language(current, language)
        return
    if current and language in current:
        return
    # Seed with what currently shows through from the asset tiers
    seed = {
        field.value: inherited_setting(
            field, staged.asset, staged.instance, language, ResolutionPhase.INSTANCE_LANG
        )[1]
        for field in SettingField
    }
    staged.instance_attrs["override_language_settings"] = update_settings_map(current, language, seed)


def _stage_settings(staged: _StagedWrite, tier: Tier, language: str | None, updates: dict[str, Any]) -> None:
    if tier is Tier.COMMON:
        for field, value in updates.items():
            if is_empty_value(value):
                raise MissingCommonDefaultError(field)
        current: CommonSettings = staged.asset_value("default_settings")
        staged.asset_attrs["default_settings"] = CommonSettings.model_validate(
            {**current.model_dump(), **updates}
        )
    elif tier is Tier.ASSET_LANG:
        staged.asset_attrs["default_language_override"] = update_settings_map(
            staged.asset_value("default_language_override"), language, updates
        )
    else:
        staged.instance_attrs["override_language_settings"] = update_settings_map(
            staged.instance_value("override_language_settings"), language, updates
        )


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------

def _commit(asset: TextAsset, instance: TextAssetInstance | None, staged: _StagedWrite) -> None:
    """Assign the staged attributes. The caller holds `store_lock(asset)`."""
    for attr, value in staged.asset_attrs.items():
        setattr(asset, attr, value)
    for attr, value in staged.instance_attrs.items():
        setattr(instance, attr, value)
    logger.debug(
        "Committed asset=%s %s instance=%s %s",
        asset.id, sorted(staged.asset_attrs),
        instance.id if instance is not None else None, sorted(staged.instance_attrs),
    )


# ---------------------------------------------------------------------------
# Override reset
# ---------------------------------------------------------------------------

# Style overrides a reset clears. The page text is content, not style, and
# is only cleared on request.
_RESET_ATTRS = ("override_language_settings", "override_context")


def reset_instance_overrides(
    asset: TextAsset,
    instance: TextAssetInstance,
    *,
    include_text: bool = False,
) -> bool:
    """Drop every per-language settings override and the context override.

    The placement then renders purely from its asset. Returns False when
    there was nothing to clear.
    """
    if instance.asset_id != asset.id:
        raise CascadeError(f"Instance {instance.id!r} belongs to asset {instance.asset_id!r}, not {asset.id!r}")
    attrs = _RESET_ATTRS + (("multilingual_text",) if include_text else ())

    with store_lock(asset):
        staged = _StagedWrite(asset, instance)
        for attr in attrs:
            if getattr(instance, attr) is not None:
                staged.instance_attrs[attr] = None
        if not staged.instance_attrs:
            return False
        _commit(asset, instance, staged)
    logger.info("Reset overrides of instance %s: %s", instance.id, sorted(staged.instance_attrs))
    return True


def reset_asset_overrides(
    asset: TextAsset,
    pages: Iterable[Page],
    *,
    include_text: bool = False,
) -> list[str]:
    """Reset every placement of `asset` across `pages` (a spreadsheet column).

    Returns the ids of the instances that had something cleared.
    """
    reset: list[str] = []
    for page in pages:
        for instance in page.asset_instances.values():
            if instance.asset_id != asset.id:
                continue
            if reset_instance_overrides(asset, instance, include_text=include_text):
                reset.append(instance.id)
    return reset


def reset_page_overrides(
    page: Page,
    assets: Mapping[str, TextAsset],
    *,
    include_text: bool = False,
) -> list[str]:
    """Reset every placement on `page` (a spreadsheet row).

    Instances whose asset no longer exists are skipped. Returns the ids of
    the instances that had something cleared.
    """
    reset: list[str] = []
    for instance_id, instance in page.asset_instances.items():
        asset = assets.get(instance.asset_id)
        if asset is None:
            logger.debug("Skipping instance %s on page %s: asset %s is gone", instance_id, page.id, instance.asset_id)
            continue
        if reset_instance_overrides(asset, instance, include_text=include_text):
            reset.append(instance_id)
    return reset
