"""Phase Classifier — derive the resolution phase from the editor focus.

The phase is a pure function of (editing target, active tab, current
language) and is recomputed on every focus change; nothing here is cached.

AUTO is never produced by `classify_phase`. Preview code asks
`preview_target` instead, which substitutes AUTO for an eligible phase when
the language under edit has no override at its own tier yet, so the preview
shows what would actually render rather than a placeholder.
"""
import logging
from collections.abc import Collection
from typing import NamedTuple

from cascade.errors import PhaseClassificationError
from models.instance import TextAssetInstance
from models.phase import COMMON_TAB, LANGUAGE_PHASES, EditContext, EditingTarget, ResolutionPhase
from models.text_asset import TextAsset
from settings import Settings

logger = logging.getLogger(__name__)


def classify_phase(
    editing_target: EditingTarget,
    active_tab: str | None = None,
    current_language: str | None = None,
    supported_languages: Collection[str] | None = None,
) -> EditContext:
    """Map the editor focus to an EditContext.

    asset + "common" tab → ASSET_COMMON
    asset + language tab → ASSET_LANG (language = tab)
    instance             → INSTANCE_LANG (language = current language)
    """
    if editing_target == "asset":
        if not active_tab:
            raise PhaseClassificationError("Asset editing requires an active tab")
        if active_tab == COMMON_TAB:
            return EditContext(phase=ResolutionPhase.ASSET_COMMON)
        _check_supported(active_tab, supported_languages)
        return EditContext(phase=ResolutionPhase.ASSET_LANG, language=active_tab)

    if editing_target == "instance":
        if not current_language:
            raise PhaseClassificationError("Instance editing requires the current language")
        _check_supported(current_language, supported_languages)
        return EditContext(phase=ResolutionPhase.INSTANCE_LANG, language=current_language)

    raise PhaseClassificationError(f"Unknown editing target: {editing_target!r}")


def _check_supported(language: str, supported_languages: Collection[str] | None) -> None:
    if supported_languages is not None and language not in supported_languages:
        raise PhaseClassificationError(
            f"Language {language!r} is not one of the supported languages {sorted(supported_languages)}"
        )


def has_own_tier_override(
    context: EditContext,
    asset: TextAsset,
    instance: TextAssetInstance | None,
) -> bool:
    """Whether the language under edit defines anything at the phase's own tier."""
    language = context.language
    if context.phase is ResolutionPhase.ASSET_LANG:
        return language in asset.override_languages()
    if context.phase is ResolutionPhase.INSTANCE_LANG:
        if instance is None:
            return False
        # override_context is shared by all languages, so it does not count here
        return (
            language in (instance.override_language_settings or {})
            or language in (instance.multilingual_text or {})
        )
    # ASSET_COMMON always has its values; AUTO has no tier of its own
    return context.phase is ResolutionPhase.ASSET_COMMON


class PreviewTarget(NamedTuple):
    """What a live preview resolves with: a phase and the instance to read.

    Asset editors never read the instance tier, so `instance` is None for
    every phase except INSTANCE_LANG.
    """

    phase: ResolutionPhase
    instance: TextAssetInstance | None


def preview_target(
    context: EditContext,
    asset: TextAsset,
    instance: TextAssetInstance | None,
    settings: Settings | None = None,
) -> PreviewTarget:
    """Phase and instance a live preview should resolve with.

    An eligible phase (`settings.auto_substitution_phases`) falls back to
    AUTO while the language under edit has no override at its own tier.
    """
    if context.phase is not ResolutionPhase.INSTANCE_LANG:
        instance = None
    eligible = settings.auto_substitution_phases if settings is not None else LANGUAGE_PHASES
    if context.phase not in eligible or has_own_tier_override(context, asset, instance):
        return PreviewTarget(context.phase, instance)
    logger.debug(
        "No %s override for %r on %s, previewing with AUTO",
        context.phase.value, context.language, asset.id,
    )
    return PreviewTarget(ResolutionPhase.AUTO, instance)
