"""Theme schemas: design tokens used by the layout template."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ThemeColors(BaseModel):
    primary: str = "#9C6BFF"
    secondary: str = "#A3E3C2"
    text: str = "#1E1E1E"
    background: str = "#F8F8FF"


class ThemeFonts(BaseModel):
    display: str = "Outfit"
    body: str = "Inter"


class ThemeRadius(BaseModel):
    small: str = "0.5rem"
    medium: str = "1rem"
    large: str = "2rem"


class Theme(BaseModel):
    """The site theme. The defaults are the first-run palette."""

    colors: ThemeColors = Field(default_factory=ThemeColors)
    fonts: ThemeFonts = Field(default_factory=ThemeFonts)
    radius: ThemeRadius = Field(default_factory=ThemeRadius)
