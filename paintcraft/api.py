from __future__ import annotations

import logging
from typing import Annotated, Literal

import requests
from fastapi import FastAPI, HTTPException
from PIL import UnidentifiedImageError
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from paintcraft.src.color_engine.colorspace import hex_to_rgb
from paintcraft.src.color_engine.io import read_pixel_buffer
from paintcraft.src.color_engine.mixer import MixRecipeSolver
from paintcraft.src.color_engine.models import Material, PixelBuffer, StepType
from paintcraft.src.color_engine.pipeline import ColorPaletteService
from paintcraft.src.color_engine.quick import extract_image_colors
from paintcraft.src.color_engine.recipes import generate_mixing_recipe
from paintcraft.src.color_engine.steps import colors_for_step, step_label

logger = logging.getLogger(__name__)

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"
HexColor = Annotated[str, Field(pattern=HEX_PATTERN, description="#RRGGBB")]


class PaletteRequest(BaseModel):
    image_url: str = Field(..., description="HTTP(S) image URL or local path")
    material: Material = Field(..., description="Drawing material")
    max_colors: int = Field(default=8, ge=3, le=12, description="Colors to extract")


class RecipeRequest(BaseModel):
    target_hex: HexColor


class BatchRecipeRequest(BaseModel):
    colors: list[HexColor] = Field(..., min_length=1, max_length=64)


class ColorInput(BaseModel):
    hex: HexColor


class MixingRecipeRequest(BaseModel):
    color: ColorInput
    material: Material


class ImageColorsRequest(BaseModel):
    image_url: str = Field(..., description="HTTP(S) image URL or local path")
    step_type: StepType | None = Field(
        default=None, description="Only return colors relevant to this step"
    )


class RGBItem(BaseModel):
    r: int
    g: int
    b: int


class HSVItem(BaseModel):
    h: int
    s: int
    v: int


class ColorAnalysisItem(BaseModel):
    rgb: RGBItem
    hsv: HSVItem
    hex: str
    colorName: str
    frequency: float


class ColorPaletteItem(BaseModel):
    colors: list[ColorAnalysisItem]
    dominantColor: ColorAnalysisItem
    complementaryColors: list[ColorAnalysisItem]
    temperature: Literal["warm", "cool", "neutral"]
    complexity: int


class PaletteResponse(BaseModel):
    palette: ColorPaletteItem
    material: Material
    extractionMethod: Literal["kmeans", "dominant", "fallback"]


class MixColorItem(BaseModel):
    name: str
    hex: str
    ratio: int


class ColorErrorItem(BaseModel):
    method: str
    value: float


class ColorRecipeItem(BaseModel):
    name: str
    mix: list[MixColorItem]
    order: list[str]
    estimatedResultHex: str
    estimatedError: ColorErrorItem
    sentence_ja: str


class RecipeResponse(BaseModel):
    target: str
    recipes: list[ColorRecipeItem]


class BatchRecipeItem(BaseModel):
    color: str
    recipe: RecipeResponse


class BatchRecipeResponse(BaseModel):
    batchResults: list[BatchRecipeItem]


class BasicColorItem(BaseModel):
    name: str
    ratio: int
    hex: str


class TechniqueItem(BaseModel):
    technique: str
    tips: list[str]
    warnings: list[str] | None = None


class MixingRecipeResponse(BaseModel):
    basicColors: list[BasicColorItem]
    steps: list[str]
    materialSpecific: dict[str, TechniqueItem]


class ImageColorItem(BaseModel):
    hex: str
    name: str
    percentage: int


class ImageColorsResponse(BaseModel):
    colors: list[ImageColorItem]
    stepLabel: str | None = None


app = FastAPI(
    title="Paint Tutorial Color API",
    version="1.0.0",
    description="Palette extraction and paint mixing recipes for painting tutorials.",
)


def _build_service() -> ColorPaletteService:
    return ColorPaletteService()


def _build_solver() -> MixRecipeSolver:
    return MixRecipeSolver()


async def _load_buffer(image_url: str) -> PixelBuffer:
    try:
        return await run_in_threadpool(read_pixel_buffer, image_url)
    except (requests.RequestException, UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("failed to load image %s: %s", image_url, exc)
        raise HTTPException(
            status_code=400, detail=f"failed_to_load_image: {exc}"
        ) from exc


@app.post("/color-palette", response_model=PaletteResponse)
async def extract_palette(payload: PaletteRequest) -> PaletteResponse:
    buffer = await _load_buffer(payload.image_url)
    service = _build_service()
    result = await run_in_threadpool(
        service.run_buffer, buffer, payload.material, payload.max_colors
    )
    return PaletteResponse.model_validate(result.to_dict())


@app.post("/color-recipe", response_model=RecipeResponse)
async def color_recipe(payload: RecipeRequest) -> RecipeResponse:
    result = await run_in_threadpool(_build_solver().solve, payload.target_hex)
    return RecipeResponse.model_validate(result.to_dict())


@app.post("/color-recipe/batch", response_model=BatchRecipeResponse)
async def color_recipe_batch(payload: BatchRecipeRequest) -> BatchRecipeResponse:
    results = await run_in_threadpool(_build_solver().solve_many, payload.colors)
    return BatchRecipeResponse(
        batchResults=[
            BatchRecipeItem(
                color=color, recipe=RecipeResponse.model_validate(recipe.to_dict())
            )
            for color, recipe in results
        ]
    )


@app.post("/mixing-recipe", response_model=MixingRecipeResponse)
async def mixing_recipe(payload: MixingRecipeRequest) -> MixingRecipeResponse:
    recipe = generate_mixing_recipe(hex_to_rgb(payload.color.hex), payload.material)
    return MixingRecipeResponse.model_validate(recipe.to_dict())


@app.post("/image-colors", response_model=ImageColorsResponse)
async def image_colors(payload: ImageColorsRequest) -> ImageColorsResponse:
    buffer = await _load_buffer(payload.image_url)
    colors = await run_in_threadpool(extract_image_colors, buffer)

    label = None
    if payload.step_type is not None:
        colors = colors_for_step(payload.step_type, colors)
        label = step_label(payload.step_type)

    return ImageColorsResponse(
        colors=[ImageColorItem.model_validate(color.to_dict()) for color in colors],
        stepLabel=label,
    )
