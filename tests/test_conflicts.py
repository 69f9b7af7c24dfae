"""Tests for the z-order Conflict Detector."""
import logging

from cascade.conflicts import check_z_index_conflict, effective_z_index, find_page_conflicts
from cascade.writer import apply_updates
from models.instance import TextAssetInstance
from models.language_settings import CommonSettings, LanguageSettings
from models.phase import ResolutionPhase
from models.project import Page, Project
from models.text_asset import TextAsset


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _asset(asset_id: str, name: str, z: int) -> TextAsset:
    return TextAsset(id=asset_id, name=name, default_settings=CommonSettings(z_index=z))


def _instance(instance_id: str, asset_id: str, z_by_lang: dict[str, int] | None = None) -> TextAssetInstance:
    overrides = {lang: LanguageSettings(z_index=z) for lang, z in (z_by_lang or {}).items()}
    return TextAssetInstance(id=instance_id, asset_id=asset_id, override_language_settings=overrides or None)


def _page(*instances: TextAssetInstance) -> Page:
    return Page(id="page-1", title="Cover", asset_instances={i.id: i for i in instances})


def _scenario():
    """A: asset z=0, no override. B: asset z=5, instance override z=0 (ja)."""
    assets = {
        "asset-a": _asset("asset-a", "Title", 0),
        "asset-b": _asset("asset-b", "Balloon", 5),
    }
    page = _page(_instance("inst-a", "asset-a"), _instance("inst-b", "asset-b", {"ja": 0}))
    return assets, page


# ---------------------------------------------------------------------------
# effective_z_index
# ---------------------------------------------------------------------------

class TestEffectiveZIndex:
    def test_instance_override_wins(self):
        assets, page = _scenario()
        assert effective_z_index(assets["asset-b"], page.asset_instances["inst-b"], "ja") == 0

    def test_falls_back_to_asset_default(self):
        assets, page = _scenario()
        assert effective_z_index(assets["asset-b"], page.asset_instances["inst-b"], "en") == 5
        assert effective_z_index(assets["asset-a"], page.asset_instances["inst-a"], "ja") == 0

    def test_language_default_tier_is_not_consulted(self):
        asset = _asset("asset-c", "Note", 1)
        asset.default_language_override = {"en": LanguageSettings(z_index=9)}
        assert effective_z_index(asset, None, "en") == 1
        assert effective_z_index(asset, _instance("inst-c", "asset-c"), "en") == 1

    def test_without_language_uses_common_default(self):
        assets, page = _scenario()
        assert effective_z_index(assets["asset-b"], page.asset_instances["inst-b"]) == 5

    def test_asset_language_default_does_not_conflict(self):
        assets, page = _scenario()
        assets["asset-b"].default_language_override = {"en": LanguageSettings(z_index=0)}
        assert check_z_index_conflict(page, assets, "inst-a", 0, "en") is None


# ---------------------------------------------------------------------------
# check_z_index_conflict
# ---------------------------------------------------------------------------

class TestCheckConflict:
    def test_conflict_names_other_asset(self):
        assets, page = _scenario()
        conflict = check_z_index_conflict(page, assets, "inst-a", 0, "ja")
        assert conflict is not None
        assert conflict.instance_id == "inst-a"
        assert conflict.conflicting_instance_ids == ["inst-b"]
        assert conflict.conflicting_asset_names == ["Balloon"]
        assert "Balloon" in conflict.message

    def test_no_conflict_for_free_value(self):
        assets, page = _scenario()
        assert check_z_index_conflict(page, assets, "inst-a", 1, "ja") is None

    def test_instance_under_test_is_excluded(self):
        assets = {"asset-a": _asset("asset-a", "Title", 0)}
        page = _page(_instance("inst-a", "asset-a"))
        assert check_z_index_conflict(page, assets, "inst-a", 0, "ja") is None

    def test_language_matters(self):
        assets, page = _scenario()
        # In English inst-b shows through to its asset default of 5
        assert check_z_index_conflict(page, assets, "inst-a", 0, "en") is None
        assert check_z_index_conflict(page, assets, "inst-a", 5, "en") is not None

    def test_instances_of_deleted_assets_are_skipped(self):
        assets, page = _scenario()
        del assets["asset-b"]
        assert check_z_index_conflict(page, assets, "inst-a", 0, "ja") is None

    def test_asset_name_listed_once(self):
        assets = {
            "asset-a": _asset("asset-a", "Title", 0),
            "asset-b": _asset("asset-b", "Balloon", 3),
        }
        page = _page(
            _instance("inst-a", "asset-a"),
            _instance("inst-b1", "asset-b"),
            _instance("inst-b2", "asset-b"),
        )
        conflict = check_z_index_conflict(page, assets, "inst-a", 3, "ja")
        assert conflict.conflicting_instance_ids == ["inst-b1", "inst-b2"]
        assert conflict.conflicting_asset_names == ["Balloon"]

    def test_conflict_is_logged_as_warning(self, caplog):
        assets, page = _scenario()
        with caplog.at_level(logging.WARNING, logger="cascade.conflicts"):
            check_z_index_conflict(page, assets, "inst-a", 0, "ja")
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_conflict_does_not_block_write(self):
        assets, page = _scenario()
        inst_a = page.asset_instances["inst-a"]
        conflict = check_z_index_conflict(page, assets, "inst-a", 0, "ja")
        result = apply_updates(assets["asset-a"], inst_a, ResolutionPhase.INSTANCE_LANG, "ja", {"z_index": 0})
        assert conflict is not None
        assert result.ok
        assert effective_z_index(assets["asset-a"], inst_a, "ja") == 0


# ---------------------------------------------------------------------------
# find_page_conflicts
# ---------------------------------------------------------------------------

class TestFindPageConflicts:
    def test_reports_each_side(self):
        assets, page = _scenario()
        conflicts = find_page_conflicts(page, assets, "ja")
        assert {c.instance_id for c in conflicts} == {"inst-a", "inst-b"}

    def test_no_conflicts(self):
        assets, page = _scenario()
        assert find_page_conflicts(page, assets, "en") == []

    def test_fixture_project(self, sample_project_path):
        project = Project.load(sample_project_path)
        conflicts = find_page_conflicts(project.page("page-2"), project.assets, "ja")
        assert {c.instance_id for c in conflicts} == {"inst-title-2", "inst-caption"}
        assert find_page_conflicts(project.page("page-2"), project.assets, "en") == []
