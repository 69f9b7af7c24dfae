"""Conflict Detector — flag duplicate effective z-order values on a page.

Duplicate z_index values are legal; this only produces warnings for the UI.
Nothing here raises or blocks the write that caused the conflict.
"""
import logging
from collections.abc import Mapping

from pydantic import BaseModel, Field

from cascade.tiers import INSTANCE_LANG_TIER
from models.instance import TextAssetInstance
from models.project import Page
from models.text_asset import TextAsset

logger = logging.getLogger(__name__)


class ZIndexConflict(BaseModel):
    """Non-blocking warning: `instance_id` shares its z_index with other instances."""

    instance_id: str
    z_index: int
    conflicting_instance_ids: list[str] = Field(default_factory=list)
    conflicting_asset_names: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        names = ", ".join(self.conflicting_asset_names)
        return f"z-index {self.z_index} is also used by: {names}"


def effective_z_index(
    asset: TextAsset,
    instance: TextAssetInstance | None,
    language: str | None = None,
) -> int:
    """z_index for conflict checks: the instance override, else the common default.

    This is a one-tier fallback; the asset's per-language defaults are not
    consulted. Without a language only the common default applies.
    """
    own = INSTANCE_LANG_TIER.settings(asset, instance, language)
    if own is not None and own.z_index is not None:
        return own.z_index
    return asset.default_settings.z_index


def check_z_index_conflict(
    page: Page,
    assets: Mapping[str, TextAsset],
    instance_id: str,
    new_z: int,
    language: str | None,
) -> ZIndexConflict | None:
    """Compare `new_z` against every other instance on the page.

    Instances whose asset no longer exists are skipped. Returns None when
    there is no conflict.
    """
    conflicting_ids: list[str] = []
    conflicting_names: list[str] = []

    for other_id, other in page.asset_instances.items():
        if other_id == instance_id:
            continue
        asset = assets.get(other.asset_id)
        if asset is None:
            logger.debug("Skipping instance %s on page %s: asset %s is gone", other_id, page.id, other.asset_id)
            continue
        if effective_z_index(asset, other, language) == new_z:
            conflicting_ids.append(other_id)
            if asset.name not in conflicting_names:
                conflicting_names.append(asset.name)

    if not conflicting_ids:
        return None

    conflict = ZIndexConflict(
        instance_id=instance_id,
        z_index=new_z,
        conflicting_instance_ids=conflicting_ids,
        conflicting_asset_names=conflicting_names,
    )
    logger.warning("Page %s, instance %s: %s", page.id, instance_id, conflict.message)
    return conflict


def find_page_conflicts(
    page: Page,
    assets: Mapping[str, TextAsset],
    language: str | None,
) -> list[ZIndexConflict]:
    """Run the check for every instance at its current effective z_index."""
    conflicts: list[ZIndexConflict] = []
    for instance_id, instance in page.asset_instances.items():
        asset = assets.get(instance.asset_id)
        if asset is None:
            continue
        z = effective_z_index(asset, instance, language)
        conflict = check_z_index_conflict(page, assets, instance_id, z, language)
        if conflict is not None:
            conflicts.append(conflict)
    return conflicts
