from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

RGB = tuple[int, int, int]
HSV = tuple[int, int, int]
LAB = tuple[float, float, float]


class Material(str, Enum):
    PENCIL = "pencil"
    WATERCOLOR = "watercolor"
    COLORED_PENCIL = "colored-pencil"
    ACRYLIC = "acrylic"


class StepType(str, Enum):
    LINEART = "lineart"
    BACKGROUND = "background"
    SKIN = "skin"
    CLOTHING = "clothing"
    HAIR = "hair"
    ACCESSORIES = "accessories"
    DETAILS = "details"
    MAIN_PART = "main_part"
    OTHER = "other"


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded image samples laid out row-major, ``channels`` values per pixel."""

    data: bytes
    width: int
    height: int
    channels: int

    @classmethod
    def from_array(cls, image: np.ndarray) -> PixelBuffer:
        array = np.ascontiguousarray(image, dtype=np.uint8)
        if array.ndim == 2:
            array = array[:, :, None]
        if array.ndim != 3:
            raise ValueError("image must have shape (H, W) or (H, W, C)")
        height, width, channels = array.shape
        return cls(
            data=array.tobytes(), width=width, height=height, channels=channels
        )

    def to_rgb_array(self) -> np.ndarray:
        if self.channels < 3:
            raise ValueError(f"expected at least 3 channels, got {self.channels}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("pixel buffer is empty")
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"pixel buffer holds {len(self.data)} bytes, expected {expected}"
            )
        samples = np.frombuffer(self.data, dtype=np.uint8)
        return samples.reshape(self.height, self.width, self.channels)[:, :, :3]


@dataclass(frozen=True)
class ColorAnalysis:
    rgb: RGB
    hsv: HSV
    hex: str
    color_name: str
    frequency: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "rgb": {"r": self.rgb[0], "g": self.rgb[1], "b": self.rgb[2]},
            "hsv": {"h": self.hsv[0], "s": self.hsv[1], "v": self.hsv[2]},
            "hex": self.hex,
            "colorName": self.color_name,
            "frequency": float(self.frequency),
        }


@dataclass(frozen=True)
class ColorPalette:
    colors: list[ColorAnalysis]
    dominant_color: ColorAnalysis
    complementary_colors: list[ColorAnalysis]
    temperature: str
    complexity: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "colors": [color.to_dict() for color in self.colors],
            "dominantColor": self.dominant_color.to_dict(),
            "complementaryColors": [
                color.to_dict() for color in self.complementary_colors
            ],
            "temperature": self.temperature,
            "complexity": int(self.complexity),
        }


@dataclass(frozen=True)
class ColorPaletteResponse:
    palette: ColorPalette
    material: Material | str | None
    extraction_method: str

    def to_dict(self) -> dict[str, Any]:
        material = self.material
        if isinstance(material, Material):
            material = material.value
        return {
            "palette": self.palette.to_dict(),
            "material": material,
            "extractionMethod": self.extraction_method,
        }


@dataclass(frozen=True)
class PaintColor:
    name: str
    hex: str
    rgb: RGB


@dataclass(frozen=True)
class MixColor:
    name: str
    hex: str
    ratio: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "hex": self.hex, "ratio": int(self.ratio)}


@dataclass(frozen=True)
class ColorError:
    method: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "value": float(self.value)}


@dataclass(frozen=True)
class ColorRecipe:
    name: str
    mix: list[MixColor]
    order: list[str]
    estimated_result_hex: str
    estimated_error: ColorError
    sentence_ja: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "mix": [color.to_dict() for color in self.mix],
            "order": list(self.order),
            "estimatedResultHex": self.estimated_result_hex,
            "estimatedError": self.estimated_error.to_dict(),
            "sentence_ja": self.sentence_ja,
        }


@dataclass(frozen=True)
class ColorRecipeResponse:
    target: str
    recipes: list[ColorRecipe]

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "recipes": [recipe.to_dict() for recipe in self.recipes],
        }


@dataclass(frozen=True)
class BasicColorShare:
    name: str
    ratio: int
    hex: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ratio": int(self.ratio), "hex": self.hex}


@dataclass(frozen=True)
class MaterialTechnique:
    technique: str
    tips: list[str]
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"technique": self.technique, "tips": list(self.tips)}
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload


@dataclass(frozen=True)
class MixingRecipe:
    basic_colors: list[BasicColorShare]
    steps: list[str]
    material: Material
    technique: MaterialTechnique

    def to_dict(self) -> dict[str, Any]:
        return {
            "basicColors": [share.to_dict() for share in self.basic_colors],
            "steps": list(self.steps),
            "materialSpecific": {self.material.value: self.technique.to_dict()},
        }


@dataclass(frozen=True)
class ImageColor:
    hex: str
    name: str
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {"hex": self.hex, "name": self.name, "percentage": int(self.percentage)}
