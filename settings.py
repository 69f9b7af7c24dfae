import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models.phase import LANGUAGE_PHASES, ResolutionPhase


class Settings(BaseSettings):
    # Programmer errors in the writer raise (development) or are logged and
    # rejected with the store unchanged (production)
    strict_writes: bool = True
    # Editing phases whose preview falls back to AUTO while the language
    # under edit has no override of its own
    auto_substitution_phases: frozenset[ResolutionPhase] = LANGUAGE_PHASES
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CASCADE_",
        env_file_encoding="utf-8",
    )

    @field_validator("auto_substitution_phases")
    @classmethod
    def only_language_phases_substitute(cls, v: frozenset[ResolutionPhase]) -> frozenset[ResolutionPhase]:
        invalid = v - LANGUAGE_PHASES
        if invalid:
            names = ", ".join(sorted(p.value for p in invalid))
            raise ValueError(f"Phases not eligible for AUTO substitution: {names}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_exist(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
