from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import requests
from PIL import Image

from .models import PixelBuffer

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


def read_pixel_buffer(image_path: str | Path) -> PixelBuffer:
    return PixelBuffer.from_array(read_image_rgb(image_path))


def read_image_rgb(image_path: str | Path) -> np.ndarray:
    path_str = str(image_path)
    if path_str.startswith(("http://", "https://")):
        logger.debug("downloading image %s", path_str)
        response = requests.get(path_str, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return decode_image_bytes(response.content)

    path = Path(image_path)
    with Image.open(path) as image:
        rgb = image.convert("RGB")
        return np.asarray(rgb, dtype=np.uint8)


def decode_image_bytes(payload: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(payload)) as image:
        rgb = image.convert("RGB")
        return np.asarray(rgb, dtype=np.uint8)


def write_json(payload: dict[str, Any] | list[Any], output_path: str | Path) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    path.write_text(text + "\n", encoding="utf-8")
