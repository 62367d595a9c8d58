from .colorspace import ColorValidationError
from .extract import ColorPaletteResult, ExtractionTierError, PaletteExtractor
from .mixer import MixRecipeSolver, calculate_color_recipe
from .models import (
    ColorAnalysis,
    ColorPalette,
    ColorPaletteResponse,
    ColorRecipe,
    ColorRecipeResponse,
    Material,
    PixelBuffer,
    StepType,
)
from .pipeline import ColorPaletteService

__all__ = [
    "ColorAnalysis",
    "ColorPalette",
    "ColorPaletteResponse",
    "ColorPaletteResult",
    "ColorPaletteService",
    "ColorRecipe",
    "ColorRecipeResponse",
    "ColorValidationError",
    "ExtractionTierError",
    "Material",
    "MixRecipeSolver",
    "PaletteExtractor",
    "PixelBuffer",
    "StepType",
    "calculate_color_recipe",
]
