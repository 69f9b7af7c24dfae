"""Phase → tier table shared by the resolver and the writer.

Each tier is described once by a `TierAccessor` (how to read settings, text
and context from it). `READ_TIERS` lists, per phase, the tiers consulted in
priority order; the first entry is also the tier a write in that phase
lands in. AUTO is read-only.
"""
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from cascade.errors import PhaseError
from models.instance import TextAssetInstance
from models.language_settings import CommonSettings, LanguageSettings
from models.phase import ResolutionPhase
from models.text_asset import TextAsset


class Tier(str, Enum):
    INSTANCE_LANG = "instance_lang"
    ASSET_LANG = "asset_lang"
    COMMON = "common"


_SettingsReader = Callable[[TextAsset, TextAssetInstance | None, str | None], LanguageSettings | CommonSettings | None]
_TextReader = Callable[[TextAsset, TextAssetInstance | None, str | None], str | None]


@dataclass(frozen=True)
class TierAccessor:
    tier: Tier
    settings: _SettingsReader
    text: _TextReader
    context: _TextReader


# ---------------------------------------------------------------------------
# Instance per-language tier
# ---------------------------------------------------------------------------

def _instance_settings(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> LanguageSettings | None:
    if instance is None or language is None or not instance.override_language_settings:
        return None
    return instance.override_language_settings.get(language)


def _instance_text(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> str | None:
    if instance is None or language is None or not instance.multilingual_text:
        return None
    return instance.multilingual_text.get(language)


def _instance_context(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> str | None:
    # Single field shared by all languages
    if instance is None:
        return None
    return instance.override_context


# ---------------------------------------------------------------------------
# Asset per-language tier
# ---------------------------------------------------------------------------

def _asset_lang_settings(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> LanguageSettings | None:
    if language is None or not asset.default_language_override:
        return None
    return asset.default_language_override.get(language)


def _asset_lang_text(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> str | None:
    if language is None or not asset.default_text_override:
        return None
    return asset.default_text_override.get(language)


def _no_context(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> None:
    return None


# ---------------------------------------------------------------------------
# Common defaults
# ---------------------------------------------------------------------------

def _common_settings(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> CommonSettings:
    return asset.default_settings


def _common_text(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> str:
    return asset.default_text


def _common_context(
    asset: TextAsset, instance: TextAssetInstance | None, language: str | None
) -> str:
    return asset.default_context


INSTANCE_LANG_TIER = TierAccessor(Tier.INSTANCE_LANG, _instance_settings, _instance_text, _instance_context)
ASSET_LANG_TIER = TierAccessor(Tier.ASSET_LANG, _asset_lang_settings, _asset_lang_text, _no_context)
COMMON_TIER = TierAccessor(Tier.COMMON, _common_settings, _common_text, _common_context)

READ_TIERS: dict[ResolutionPhase, tuple[TierAccessor, ...]] = {
    ResolutionPhase.ASSET_COMMON: (COMMON_TIER,),
    ResolutionPhase.ASSET_LANG: (ASSET_LANG_TIER, COMMON_TIER),
    ResolutionPhase.INSTANCE_LANG: (INSTANCE_LANG_TIER, ASSET_LANG_TIER, COMMON_TIER),
    ResolutionPhase.AUTO: (INSTANCE_LANG_TIER, ASSET_LANG_TIER, COMMON_TIER),
}


def read_tiers(phase: ResolutionPhase) -> tuple[TierAccessor, ...]:
    return READ_TIERS[ResolutionPhase(phase)]


def write_tier(phase: ResolutionPhase) -> TierAccessor:
    """The single tier that receives writes in `phase`."""
    phase = ResolutionPhase(phase)
    if phase is ResolutionPhase.AUTO:
        raise PhaseError("AUTO is a read-only phase; writes need an explicit editing phase")
    return READ_TIERS[phase][0]


def fallback_tiers(phase: ResolutionPhase) -> tuple[TierAccessor, ...]:
    """Tiers below the phase's own tier — what shows through when it is unset."""
    return READ_TIERS[ResolutionPhase(phase)][1:]
