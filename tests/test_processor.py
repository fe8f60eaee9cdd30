"""Integration tests for ImageConverter and image decoding."""

import io
import logging

import numpy as np
import pytest

from mapconverter.errors import ConversionCancelled, ImageDecodeError
from mapconverter.image_processing import ImageConverter, load_image
from mapconverter.image_processing.pixel_buffer import PixelBuffer
from mapconverter.image_processing.preprocessing import to_grayscale
from mapconverter.models import ConversionSettings

DEFAULT_STEPS = ["Grayscale", "Blur", "Edges", "Invert", "Threshold", "Contours"]


def test_load_image_from_bytes_and_file(square_photo_png, tmp_path):
    buffer = load_image(square_photo_png)
    assert (buffer.width, buffer.height) == (60, 60)
    assert buffer.data.shape == (60, 60, 4)
    # RGB input gains an opaque alpha channel
    assert (buffer.data[:, :, 3] == 255).all()
    assert buffer.data[30, 30, :3].tolist() == [255, 255, 255]

    path = tmp_path / "square.png"
    path.write_bytes(square_photo_png)
    np.testing.assert_array_equal(load_image(path).data, buffer.data)
    np.testing.assert_array_equal(load_image(io.BytesIO(square_photo_png)).data, buffer.data)


def test_load_image_failures(tmp_path):
    with pytest.raises(ImageDecodeError, match="Failed to load image"):
        load_image(b"definitely not an image")

    with pytest.raises(ImageDecodeError):
        load_image(tmp_path / "missing.png")

    # Decode failures are ValueErrors too
    with pytest.raises(ValueError):
        load_image(b"")


def test_default_pipeline_on_square(square_photo_png):
    result = ImageConverter().process(square_photo_png)

    assert (result.width, result.height) == (60, 60)
    assert [step.name for step in result.steps] == DEFAULT_STEPS
    assert result.steps[-1].count is not None
    assert result.steps[-1].count >= len(result.regions)

    assert len(result.regions) >= 1
    areas = [region.area for region in result.regions]
    assert areas == sorted(areas, reverse=True)
    assert all(area >= 100 for area in areas)
    assert result.svg.count('class="region"') == len(result.regions)


def test_all_black_image_produces_empty_map(black_photo_png):
    result = ImageConverter().process(black_photo_png)

    assert result.regions == []
    assert result.steps[-1].count == 0
    assert "<path" not in result.svg
    assert 'viewBox="0 0 40 40"' in result.svg


def test_optional_stages_follow_settings(square_photo_png):
    settings = ConversionSettings(grayscale=False, blur=0, posterize=4, invert=False)
    result = ImageConverter(settings).process(square_photo_png)

    assert [step.name for step in result.steps] == [
        "Posterize",
        "Edges",
        "Threshold",
        "Contours",
    ]


def test_snapshots_are_independent_copies(square_photo_png):
    result = ImageConverter().process(square_photo_png)
    by_name = {step.name: step for step in result.steps}

    expected_gray = to_grayscale(load_image(square_photo_png))
    np.testing.assert_array_equal(by_name["Grayscale"].image.data, expected_gray.data)

    threshold_values = np.unique(by_name["Threshold"].image.data[:, :, :3])
    assert set(threshold_values.tolist()) <= {0, 255}
    assert by_name["Contours"].image is None


def test_step_previews(square_photo_png):
    result = ImageConverter().process(square_photo_png)

    edges = result.steps[DEFAULT_STEPS.index("Edges")]
    assert edges.to_image().size == (60, 60)
    assert edges.to_data_url().startswith("data:image/png;base64,")

    contours = result.steps[-1]
    assert contours.to_image() is None
    assert contours.to_data_url() is None


def test_per_call_settings_override(square_photo_png):
    converter = ImageConverter()

    result = converter.process(square_photo_png, {"minRegionArea": 10**6})

    assert result.regions == []
    assert converter.settings == ConversionSettings()


def test_unknown_setting_rejected(square_photo_png):
    with pytest.raises(ValueError, match="Unknown setting"):
        ImageConverter().process(square_photo_png, {"edgeSharpness": 3})


def test_cancel_between_stages(square_photo_png):
    calls = []

    def should_cancel():
        calls.append(True)
        return len(calls) >= 3

    with pytest.raises(ConversionCancelled) as excinfo:
        ImageConverter().process(square_photo_png, should_cancel=should_cancel)

    # Grayscale and Blur ran, stopped before Edges
    assert excinfo.value.stage == "Edges"


def test_process_buffer_on_binary_square():
    buffer = PixelBuffer.blank(40, 40, 0)
    buffer.data[10:30, 10:30, :3] = 255
    settings = ConversionSettings(grayscale=False, blur=0, min_region_area=50)

    result = ImageConverter().process_buffer(buffer, settings)

    assert result.regions
    assert result.svg.count("<path") == len(result.regions)
    for index, region in enumerate(result.regions):
        assert f'id="{index}"' in result.svg
        assert region.simplified_length == len(region.points)


def test_progress_is_logged(square_photo_png, caplog):
    with caplog.at_level(logging.INFO, logger="mapconverter.image_processing.processor"):
        result = ImageConverter().process(square_photo_png)

    assert "Processing 60x60 image" in caplog.text
    assert f"Kept {len(result.regions)} regions" in caplog.text
    assert "Total outline length:" in caplog.text
