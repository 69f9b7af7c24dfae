"""Scalar property set shared by every tier of the text cascade.

`LanguageSettings` is the partial form used by the override tiers: every
field is optional and `None` means "not set at this tier". `CommonSettings`
carries the same fields with mandatory values and is the final fallback of
every resolution.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict

DEFAULT_FONT_ID = "system-ui"


class SettingField(str, Enum):
    """Closed set of independently overridable scalar fields."""

    FONT = "font"
    FONT_SIZE = "font_size"
    LEADING = "leading"
    VERTICAL = "vertical"
    FILL_COLOR = "fill_color"
    STROKE_COLOR = "stroke_color"
    STROKE_WIDTH = "stroke_width"
    POS_X = "pos_x"
    POS_Y = "pos_y"
    SCALE_X = "scale_x"
    SCALE_Y = "scale_y"
    ROTATE = "rotate"
    CHAR_ROTATE = "char_rotate"
    OPACITY = "opacity"
    Z_INDEX = "z_index"


SettingValue = str | int | float | bool


class LanguageSettings(BaseModel):
    """Partial property set stored per language in an override tier."""

    model_config = ConfigDict(extra="forbid")

    font: str | None = None
    font_size: float | None = None
    leading: float | None = None
    vertical: bool | None = None
    fill_color: str | None = None
    stroke_color: str | None = None
    stroke_width: float | None = None
    pos_x: float | None = None
    pos_y: float | None = None
    scale_x: float | None = None
    scale_y: float | None = None
    rotate: float | None = None
    char_rotate: float | None = None
    opacity: float | None = None
    z_index: int | None = None

    def get(self, field: SettingField) -> SettingValue | None:
        return getattr(self, field.value)

    def present(self) -> dict[str, SettingValue]:
        """Fields defined at this tier. Falsy values (0, False, "") count as present."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.present()


class CommonSettings(BaseModel):
    """Asset-wide defaults. Every field is mandatory, there is no lower tier."""

    model_config = ConfigDict(extra="forbid")

    font: str = DEFAULT_FONT_ID
    font_size: float = 64.0
    leading: float = 0.0
    vertical: bool = False
    fill_color: str = "#000000"
    stroke_color: str = "#FFFFFF"
    stroke_width: float = 2.0
    pos_x: float = 300.0
    pos_y: float = 300.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotate: float = 0.0
    char_rotate: float = 0.0
    opacity: float = 1.0
    z_index: int = 2

    def get(self, field: SettingField) -> SettingValue:
        return getattr(self, field.value)
