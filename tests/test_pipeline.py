from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from grapeleaf.exceptions import ContextError, DecodeError, ModelLoadError, UnknownClassError
from grapeleaf.models.classifier_model import ClassifierModel
from grapeleaf.pipeline.classify_leaf import classify, classify_leaf
from grapeleaf.pipeline.preprocess_image import preprocess_image
from grapeleaf.repositories import image_repository
from grapeleaf.services.inference_service import InferenceService
from grapeleaf.services.segmentation_service import SegmentationService

from conftest import GREEN, FakeModel, encode, solid_pixels


@pytest.fixture
def scripted_service(scripted_model_path):
    return InferenceService(model=ClassifierModel(scripted_model_path))


# ─── preprocessing ───────────────────────────────────────────────────
def test_preprocess_outputs(mixed_pixels):
    prepared = preprocess_image(encode(mixed_pixels))

    np.testing.assert_array_equal(prepared.original.pixels, mixed_pixels)
    assert prepared.segmented.pixels.shape == mixed_pixels.shape
    assert tuple(prepared.segmented.pixels[0, 0]) == GREEN
    assert not prepared.segmented.pixels[:, 4:].any()
    assert prepared.tensor.shape == (1, 224, 224, 3)
    assert prepared.tensor.dtype == np.float32
    # left half of the tensor is green, right half black
    assert prepared.tensor[0, 0, 0].tolist() == [0.0, 200.0, 0.0]
    assert prepared.tensor[0, 0, 223].tolist() == [0.0, 0.0, 0.0]


def test_preprocess_does_not_touch_caller_buffer(mixed_pixels):
    data = bytearray(encode(mixed_pixels))
    before = bytes(data)
    preprocess_image(data)
    assert bytes(data) == before


def test_preprocess_with_opencv_strategy(mixed_pixels):
    prepared = preprocess_image(encode(mixed_pixels), segmentation_service=SegmentationService("opencv"))
    assert not prepared.segmented.pixels[:, 4:].any()
    assert prepared.segmented.pixels[:, :4].any()


def test_hidden_colour_under_transparency_never_reaches_tensor():
    prepared = preprocess_image(encode(solid_pixels(GREEN, alpha=0)))
    assert not prepared.segmented.pixels[:, :, :3].any()
    assert not prepared.tensor.any()


# ─── end to end ──────────────────────────────────────────────────────
def test_green_leaf_is_healthy_with_scripted_model(green_png, scripted_service):
    result = classify_leaf(green_png, inference_service=scripted_service)
    assert result.label == "Healthy"
    assert result.record.remedy
    np.testing.assert_array_equal(result.segmented.pixels, result.original.pixels)


def test_red_image_masks_to_black_and_ties_to_first_class(red_png, scripted_service):
    result = classify_leaf(red_png, inference_service=scripted_service)
    assert not result.segmented.pixels.any()
    assert result.scores == (0.0, 0.0, 0.0, 0.0)
    assert result.label == "Black Rot"


def test_classify_is_deterministic(mixed_pixels, scripted_service):
    data = encode(mixed_pixels)
    results = [classify(data, inference_service=scripted_service) for _ in range(3)]
    assert len({(r.label, r.scores) for r in results}) == 1


def test_segmented_image_available_before_inference(green_png):
    events = []

    class RecordingModel(FakeModel):
        def predict(self, tensor):
            events.append("predict")
            return super().predict(tensor)

    classify_leaf(
        green_png,
        inference_service=InferenceService(model=RecordingModel()),
        on_segmented=lambda img: events.append(("segmented", img.pixels.shape)),
    )
    assert events == [("segmented", (16, 16, 3)), "predict"]


def test_result_from_fake_scores(green_png):
    result = classify_leaf(green_png, inference_service=InferenceService(model=FakeModel((0.1, 0.7, 0.7, 0.0))))
    assert result.label == "Black Measles"
    assert result.index == 1


def test_concurrent_classification_matches_sequential(mixed_pixels, scripted_service):
    data = encode(mixed_pixels)
    expected = classify_leaf(data, inference_service=scripted_service)

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda _: classify_leaf(data, inference_service=scripted_service), range(12)))

    assert {(r.label, r.scores) for r in results} == {(expected.label, expected.scores)}


# ─── error propagation ───────────────────────────────────────────────
def test_decode_error_stops_before_inference(fake_model):
    with pytest.raises(DecodeError):
        classify_leaf(b"garbage", inference_service=InferenceService(model=fake_model))
    assert fake_model.calls == []


def test_context_error_propagates(green_png, fake_model, monkeypatch):
    def broken(_img):
        raise ValueError("no surface")

    monkeypatch.setattr(image_repository.ImageOps, "exif_transpose", broken)
    with pytest.raises(ContextError):
        classify_leaf(green_png, inference_service=InferenceService(model=fake_model))


def test_model_load_error_propagates(green_png, tmp_path, monkeypatch):
    monkeypatch.setenv("MODEL_PATH", str(tmp_path / "absent.pt"))
    with pytest.raises(ModelLoadError):
        classify_leaf(green_png, inference_service=InferenceService())


def test_unknown_class_error_propagates(green_png):
    service = InferenceService(model=FakeModel((np.nan, 0.1, 0.2, 0.3)))
    with pytest.raises(UnknownClassError):
        classify_leaf(green_png, inference_service=service)
