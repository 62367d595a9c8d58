from __future__ import annotations

from pathlib import Path

from .extract import PaletteExtractor
from .io import read_pixel_buffer
from .models import ColorPaletteResponse, Material, PixelBuffer


class ColorPaletteService:
    def __init__(
        self,
        extractor: PaletteExtractor | None = None,
        random_state: int | None = None,
    ) -> None:
        self.extractor = extractor or PaletteExtractor(random_state=random_state)

    def run(
        self,
        image_path: str | Path,
        material: Material | str | None = None,
        max_colors: int = 8,
    ) -> ColorPaletteResponse:
        # Loading errors propagate; only extraction degrades silently.
        buffer = read_pixel_buffer(image_path)
        return self.run_buffer(buffer, material=material, max_colors=max_colors)

    def run_buffer(
        self,
        buffer: PixelBuffer,
        material: Material | str | None = None,
        max_colors: int = 8,
    ) -> ColorPaletteResponse:
        result = self.extractor.extract(buffer, max_colors=max_colors)
        return ColorPaletteResponse(
            palette=result.palette,
            material=material,
            extraction_method=result.extraction_method,
        )
