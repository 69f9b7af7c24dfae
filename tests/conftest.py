from pathlib import Path

import pytest

from models.instance import TextAssetInstance
from models.language_settings import CommonSettings, LanguageSettings
from models.text_asset import TextAsset
from settings import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_PROJECT_DIR = FIXTURES_DIR / "sample_project"


@pytest.fixture
def sample_project_path() -> Path:
    """Project document with two assets and two pages used by the loader tests."""
    return SAMPLE_PROJECT_DIR / "project.yaml"


@pytest.fixture
def settings() -> Settings:
    """Settings with library defaults; ignores any CASCADE_* variables of the host."""
    return Settings(_env_file=None)


@pytest.fixture
def asset() -> TextAsset:
    """Asset with common defaults only, no per-language overrides."""
    return TextAsset(
        id="text-001",
        name="Speech bubble",
        default_text="こんにちは",
        default_context="Greeting on the first page",
        default_settings=CommonSettings(font_size=64, pos_x=100, pos_y=200, z_index=2),
    )


@pytest.fixture
def layered_asset() -> TextAsset:
    """Asset with an English language default for text, font_size and pos_x."""
    return TextAsset(
        id="text-002",
        name="Narration",
        default_text="むかしむかし",
        default_context="Opening line",
        default_settings=CommonSettings(font_size=64, pos_x=100, pos_y=200),
        default_text_override={"en": "Once upon a time"},
        default_language_override={"en": LanguageSettings(font_size=48, pos_x=120)},
    )


@pytest.fixture
def instance() -> TextAssetInstance:
    return TextAssetInstance(id="inst-001", asset_id="text-001")


@pytest.fixture
def layered_instance() -> TextAssetInstance:
    return TextAssetInstance(id="inst-002", asset_id="text-002")


@pytest.fixture
def lenient_settings() -> Settings:
    """Production-style settings: rejected writes are logged, not raised."""
    return Settings(_env_file=None, strict_writes=False)
