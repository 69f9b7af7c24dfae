"""Cascade Resolver — compute the effective value of a text, context or setting.

Every resolution walks `READ_TIERS[phase]` top-down and returns the first
value that is *present*. Presence is `is not None`: 0, False and "" set at a
tier win over lower tiers. Common defaults are mandatory, so a setting
always resolves.

The renderer calls these with ``phase=AUTO`` for the language it is drawing;
editors call them with the classified phase to refresh displayed values.
"""
from cascade.errors import UnknownFieldError
from cascade.tiers import Tier, TierAccessor, fallback_tiers, read_tiers
from models.instance import TextAssetInstance
from models.language_settings import CommonSettings, SettingField, SettingValue
from models.phase import ResolutionPhase
from models.text_asset import TextAsset

_TIER_LABELS = {
    Tier.INSTANCE_LANG: "Page override",
    Tier.ASSET_LANG: "Language default",
    Tier.COMMON: "Asset default",
}


def as_setting_field(field: SettingField | str) -> SettingField:
    if isinstance(field, SettingField):
        return field
    try:
        return SettingField(field)
    except ValueError:
        raise UnknownFieldError(str(field)) from None


# ---------------------------------------------------------------------------
# Text and context
# ---------------------------------------------------------------------------

def resolve_text(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase = ResolutionPhase.AUTO,
) -> str:
    """Effective text.

    ASSET_COMMON → base text; ASSET_LANG → language default, else base text;
    INSTANCE_LANG / AUTO → page text, then language default, then base text.
    """
    for accessor in read_tiers(phase):
        text = accessor.text(asset, instance, language)
        if text is not None:
            return text
    return asset.default_text


def resolve_context(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase = ResolutionPhase.AUTO,
) -> str:
    """Effective context note. Context has no per-language asset tier."""
    for accessor in read_tiers(phase):
        context = accessor.context(asset, instance, language)
        if context is not None:
            return context
    return asset.default_context


# ---------------------------------------------------------------------------
# Scalar settings
# ---------------------------------------------------------------------------

def _first_present(
    tiers: tuple[TierAccessor, ...],
    field: SettingField,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
) -> tuple[Tier, SettingValue] | None:
    for accessor in tiers:
        settings = accessor.settings(asset, instance, language)
        if settings is None:
            continue
        value = settings.get(field)
        if value is not None:
            return accessor.tier, value
    return None


def resolve_setting_source(
    field: SettingField | str,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase = ResolutionPhase.AUTO,
) -> Tier:
    """Which tier supplies the effective value of `field`."""
    field = as_setting_field(field)
    found = _first_present(read_tiers(phase), field, asset, instance, language)
    # Common defaults are mandatory, so the walk always ends in a hit
    return found[0] if found is not None else Tier.COMMON


def resolve_setting(
    field: SettingField | str,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase = ResolutionPhase.AUTO,
) -> SettingValue:
    field = as_setting_field(field)
    found = _first_present(read_tiers(phase), field, asset, instance, language)
    if found is None:
        return asset.default_settings.get(field)
    return found[1]


def resolve_settings(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase = ResolutionPhase.AUTO,
) -> CommonSettings:
    """Resolve every field at once; the renderer's view of a placement."""
    values = {
        field.value: resolve_setting(field, asset, instance, language, phase)
        for field in SettingField
    }
    return CommonSettings.model_validate(values)


def inherited_setting(
    field: SettingField | str,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase,
) -> tuple[Tier, SettingValue]:
    """Value that would show through if the phase's own tier did not define `field`."""
    field = as_setting_field(field)
    found = _first_present(fallback_tiers(phase), field, asset, instance, language)
    if found is None:
        return Tier.COMMON, asset.default_settings.get(field)
    return found


def placeholder_text(
    field: SettingField | str,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None,
    phase: ResolutionPhase,
) -> str | None:
    """Placeholder shown in an editor input whose own tier is unset.

    Returns e.g. "Asset default: 64" when the value shows through from a
    lower tier, or None when the phase's own tier defines the field (the
    input then shows the value itself). ASSET_COMMON always has a value.
    """
    field = as_setting_field(field)
    phase = ResolutionPhase(phase)
    own_tier = read_tiers(phase)[0]
    if phase is ResolutionPhase.AUTO or own_tier.tier is Tier.COMMON:
        return None
    own = own_tier.settings(asset, instance, language)
    if own is not None and own.get(field) is not None:
        return None
    tier, value = inherited_setting(field, asset, instance, language, phase)
    return f"{_TIER_LABELS[tier]}: {value}"
