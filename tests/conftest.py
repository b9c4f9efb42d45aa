from io import BytesIO
from pathlib import Path
from typing import Dict

import numpy as np
import pytest
import torch
from PIL import Image as PILImage

from grapeleaf.models.image import LeafImage


GREEN = (0, 200, 0)
RED = (200, 0, 0)


def solid_pixels(color, size=(4, 4), alpha=None) -> np.ndarray:
    h, w = size
    channels = list(color) + ([alpha] if alpha is not None else [])
    return np.tile(np.array(channels, dtype=np.uint8), (h, w, 1))


def encode(pixels: np.ndarray, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeModel:
    """Returns fixed scores and records every call."""

    def __init__(self, scores=(0.1, 0.2, 0.3, 0.4)):
        self.scores = np.asarray(scores, dtype=np.float64)
        self.calls = []

    def predict(self, tensor):
        self.calls.append(tensor.shape)
        return self.scores


class MeanColorScorer(torch.nn.Module):
    """Scores = [mean R, mean B, 0, mean G] over the whole input."""

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        m = x.mean(dim=[1, 2])
        return torch.stack([m[:, 0], m[:, 2], m[:, 0] * 0.0, m[:, 1]], dim=1)


class ThreeClassScorer(torch.nn.Module):
    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return x.mean(dim=[1, 2])


class DictScorer(torch.nn.Module):
    def forward(self, x: torch.Tensor) -> Dict[str, torch.Tensor]:
        return {"scores": x.mean(dim=[1, 2])}


@pytest.fixture
def green_image() -> LeafImage:
    return LeafImage(solid_pixels(GREEN))


@pytest.fixture
def red_image() -> LeafImage:
    return LeafImage(solid_pixels(RED))


@pytest.fixture
def mixed_pixels() -> np.ndarray:
    """Left half green leaf, right half brown soil."""
    pixels = solid_pixels(GREEN, size=(8, 8))
    pixels[:, 4:] = (120, 80, 40)
    return pixels


@pytest.fixture
def green_png() -> bytes:
    return encode(solid_pixels(GREEN, size=(16, 16)))


@pytest.fixture
def red_png() -> bytes:
    return encode(solid_pixels(RED, size=(16, 16)))


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def scripted_model_path(tmp_path) -> Path:
    path = tmp_path / "mean_color.pt"
    torch.jit.script(MeanColorScorer()).save(str(path))
    return path


@pytest.fixture
def dict_model_path(tmp_path) -> Path:
    path = tmp_path / "dict_output.pt"
    torch.jit.script(DictScorer()).save(str(path))
    return path


@pytest.fixture
def three_class_model_path(tmp_path) -> Path:
    path = tmp_path / "three_class.pt"
    torch.jit.script(ThreeClassScorer()).save(str(path))
    return path
