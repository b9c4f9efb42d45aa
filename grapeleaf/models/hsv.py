from __future__ import annotations
from typing import NamedTuple, Tuple
import numpy as np


class HSV(NamedTuple):
    """
    Value-object holding one colour in HSV.

    Hue is in degrees [0, 360); saturation and value are scaled to
    [0, 255] so they compare directly against byte-range RGB.
    """
    h: float
    s: float
    v: float


# ── Scalar conversion ────────────────────────────────────────────────
def rgb_to_hsv(r: int, g: int, b: int) -> HSV:
    """
    Convert one RGB triple (each 0-255) to HSV.

    Achromatic input (r == g == b) yields hue 0. When several channels
    share the maximum, the branch is picked in the order r, g, b.
    """
    mx = max(r, g, b)
    mn = min(r, g, b)
    delta = mx - mn

    v = float(mx)
    s = 0.0 if mx == 0 else (delta / mx) * 255

    h = 0.0
    if delta != 0:
        if mx == r:
            h = (g - b) / delta
        elif mx == g:
            h = (b - r) / delta + 2
        else:
            h = (r - g) / delta + 4
        h *= 60
        if h < 0:
            h += 360
    return HSV(h, s, v)


# ── Vectorised conversion (same float64 operation order) ─────────────
def rgb_to_hsv_pixels(pixels: np.ndarray) -> np.ndarray:
    """
    Args
    ----
    pixels : np.ndarray  (H, W, 3|4)  uint8  RGB(A) order

    Returns
    -------
    hsv : np.ndarray  (H, W, 3)  float64  (h in degrees, s and v in 0-255)
    """
    rgb = pixels[:, :, :3].astype(np.float64)
    r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]

    mx = rgb.max(axis=2)
    mn = rgb.min(axis=2)
    delta = mx - mn

    s = np.zeros_like(mx)
    np.divide(delta, mx, out=s, where=mx != 0)
    s *= 255

    safe_delta = np.where(delta == 0, 1.0, delta)
    h = np.select(
        [mx == r, mx == g],
        [(g - b) / safe_delta, (b - r) / safe_delta + 2],
        default=(r - g) / safe_delta + 4,
    )
    h *= 60
    h = np.where(h < 0, h + 360, h)
    h = np.where(delta == 0, 0.0, h)

    return np.stack([h, s, mx], axis=2)


# ── Inverse on the defining channels ─────────────────────────────────
def hsv_to_rgb_extrema(hsv: HSV) -> Tuple[float, float]:
    """Recover (max, min) of the source RGB channels from an HSV triple."""
    mx = hsv.v
    mn = mx - hsv.s * mx / 255
    return mx, mn
