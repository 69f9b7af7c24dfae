"""Project document: metadata, the asset library and the pages.

Only loading and serialisation live here; the engine never writes files.
Absent override maps are omitted from the JSON output (``exclude_none``)
so that save/load preserves the tier-cleanup invariant.
"""
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from models.instance import TextAssetInstance
from models.text_asset import TextAsset


class ProjectMetadata(BaseModel):
    title: str
    supported_languages: list[str] = Field(min_length=1)
    current_language: str

    @model_validator(mode="after")
    def current_language_must_be_supported(self) -> "ProjectMetadata":
        if self.current_language not in self.supported_languages:
            raise ValueError(
                f"current_language {self.current_language!r} is not in supported_languages "
                f"{self.supported_languages}"
            )
        return self


class Page(BaseModel):
    id: str
    title: str
    asset_instances: dict[str, TextAssetInstance] = Field(default_factory=dict)

    @model_validator(mode="after")
    def instance_keys_match_ids(self) -> "Page":
        for key, instance in self.asset_instances.items():
            if key != instance.id:
                raise ValueError(f"asset_instances key {key!r} does not match instance id {instance.id!r}")
        return self


class Project(BaseModel):
    metadata: ProjectMetadata
    assets: dict[str, TextAsset] = Field(default_factory=dict)
    pages: list[Page] = Field(default_factory=list)

    def page(self, page_id: str) -> Page | None:
        return next((p for p in self.pages if p.id == page_id), None)

    def dump_json(self) -> str:
        """Serialise with absent maps omitted, never written as {}."""
        return self.model_dump_json(indent=2, exclude_none=True)

    @classmethod
    def load(cls, path: Path) -> "Project":
        """Load a project document from YAML (or JSON, which YAML accepts).

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy: only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)
