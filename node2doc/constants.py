"""Fixed conversion ratios and binary constants shared by the compilers."""
from __future__ import annotations

import base64

TWIPS_PER_POINT = 20
HALF_POINTS_PER_POINT = 2
EMU_PER_POINT = 12700
PIXELS_PER_POINT = 96 / 72

POINTS_PER_INCH = 72
POINTS_PER_PICA = 12
MILLIMETERS_PER_INCH = 25.4
CENTIMETERS_PER_INCH = 2.54

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

# 1x1 transparent PNG used as the raster fallback for SVG images
TRANSPARENT_PNG_FALLBACK = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PdP7SAAAAABJRU5ErkJggg=="
)
