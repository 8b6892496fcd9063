"""Render a Julia-set fractal in parallel and save it as a 24-bit BMP."""

from __future__ import annotations

import argparse
import math
import os
import struct
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence, Union

__all__ = ["Color", "colorize", "lerp", "julia", "write_bmp", "render", "main"]

IMAGE_WIDTH = 2048
IMAGE_HEIGHT = 2048
SAMPLES_PER_PIXEL_W = 3
SAMPLES_PER_PIXEL_H = 3
WINDOW_MIN_X = -0.5
WINDOW_MAX_X = 0.5
WINDOW_MIN_Y = -0.5
WINDOW_MAX_Y = 0.5
CX = -0.8
CY = 0.156
MAX_ITERATIONS = 1000

_BMP_OFFSET = 54
_TWO_THIRDS_PI = 2.0 * math.pi / 3.0


@dataclass
class Color:
    """A colour made of red, green and blue components."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __iadd__(self, other: Color) -> Color:
        self.r += other.r
        self.g += other.g
        self.b += other.b
        return self

    def __itruediv__(self, divisor: float) -> Color:
        self.r /= divisor
        self.g /= divisor
        self.b /= divisor
        return self


def colorize(v: float) -> Color:
    """Return a rainbow colour for the scalar v, each component in [0, 1]."""
    return Color(
        0.5 + 0.5 * math.cos(v),
        0.5 + 0.5 * math.cos(v + _TWO_THIRDS_PI),
        0.5 + 0.5 * math.cos(v + 2 * _TWO_THIRDS_PI),
    )


def lerp(x: float, lo: float, hi: float) -> float:
    """Linearly interpolate between lo and hi by weight x."""
    return lo + x * (hi - lo)


def julia(x: float, y: float, cx: float, cy: float) -> Color:
    """Return the Julia-set colour of point (x, y) for the constant (cx, cy)."""
    for i in range(MAX_ITERATIONS):
        if x * x + y * y > 4:
            return colorize(math.sqrt(i))
        x, y = x * x - y * y + cx, 2 * x * y + cy
    return Color()


def _bmp_bytes(texels: Sequence[Color], width: int, height: int) -> bytes:
    if width < 0 or height < 0:
        raise ValueError("width and height must not be negative")
    if len(texels) < width * height:
        raise ValueError("not enough texels for the image size")
    padding = (-(3 * width)) & 3
    stride = 3 * width + padding
    header = struct.pack(
        "<2sIII",
        b"BM",
        _BMP_OFFSET + stride * height,
        0,
        _BMP_OFFSET,
    )
    info = struct.pack(
        "<IIIHHIIIIII",
        40,
        width,
        height,
        1,
        24,
        0,
        0,
        72,
        72,
        0,
        0,
    )
    body = bytearray()
    pad = bytes(padding)
    for y in reversed(range(height)):
        for texel in texels[y * width : (y + 1) * width]:
            body += bytes((int(texel.b) & 0xFF, int(texel.g) & 0xFF, int(texel.r) & 0xFF))
        body += pad
    return header + info + bytes(body)


def write_bmp(
    texels: Sequence[Color],
    width: int,
    height: int,
    path: Union[str, os.PathLike],
) -> None:
    """Write row-major 8-bit texels, top row first, as a 24-bit BMP file."""
    data = _bmp_bytes(texels, width, height)
    with open(path, "wb") as file:
        file.write(data)


def _render_row(y: int, width: int, height: int, samples_w: int, samples_h: int) -> list[Color]:
    row = []
    for x in range(width):
        color = Color()
        for sy in range(samples_h):
            dy = (y + sy / samples_h) / height
            for sx in range(samples_w):
                dx = (x + sx / samples_w) / width
                color += julia(
                    lerp(dx, WINDOW_MIN_X, WINDOW_MAX_X),
                    lerp(dy, WINDOW_MIN_Y, WINDOW_MAX_Y),
                    CX,
                    CY,
                )
        color /= samples_w * samples_h
        row.append(Color(int(color.r * 255), int(color.g * 255), int(color.b * 255)))
    return row


def render(
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
    samples_w: int = SAMPLES_PER_PIXEL_W,
    samples_h: int = SAMPLES_PER_PIXEL_H,
    workers: Optional[int] = None,
) -> list[Color]:
    """Render the fractal one row per task; return row-major 8-bit colours."""
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    if samples_w <= 0 or samples_h <= 0:
        raise ValueError("sample counts must be positive")
    with ThreadPoolExecutor(max_workers=workers) as executor:
        rows = executor.map(
            lambda y: _render_row(y, width, height, samples_w, samples_h),
            range(height),
        )
        return [texel for row in rows for texel in row]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render a Julia fractal to a BMP file.")
    parser.add_argument("--width", type=int, default=IMAGE_WIDTH)
    parser.add_argument("--height", type=int, default=IMAGE_HEIGHT)
    parser.add_argument("--samples", type=int, default=SAMPLES_PER_PIXEL_W)
    parser.add_argument("--workers", type=int, default=os.cpu_count())
    parser.add_argument("--output", default="fractal.bmp")
    args = parser.parse_args(argv)

    pixels = render(args.width, args.height, args.samples, args.samples, args.workers)
    try:
        write_bmp(pixels, args.width, args.height, args.output)
    except OSError:
        sys.stderr.write(f"Could not open file '{args.output}'\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())