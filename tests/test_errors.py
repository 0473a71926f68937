import pytest

from media_slicer.errors import (
    UNKNOWN_ERROR,
    EngineExecutionError,
    SegmentationFailed,
    describe_error,
)


class _Shaped:
    message = "custom shape"


class _Opaque:
    def __str__(self) -> str:
        return ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain text", "plain text"),
        (b"stderr bytes\n", "stderr bytes"),
        (ValueError("bad value"), "bad value"),
        (ValueError(), "ValueError"),
        ({"message": "from a dict"}, "from a dict"),
        (_Shaped(), "custom shape"),
        (_Opaque(), UNKNOWN_ERROR),
        (None, UNKNOWN_ERROR),
        ("", UNKNOWN_ERROR),
        (42, "42"),
    ],
)
def test_describe_error_shapes(value, expected):
    assert describe_error(value) == expected


@pytest.mark.unit
def test_engine_execution_error_keeps_raw_value():
    raw = {"code": 1, "message": "Invalid data found when processing input"}
    err = EngineExecutionError(raw, ["-i", "x"])
    assert err.raw is raw
    assert describe_error(err) == "Invalid data found when processing input"


@pytest.mark.unit
def test_error_details_are_appended():
    err = SegmentationFailed("Media processing failed", "moov atom not found")
    assert str(err) == "Media processing failed: moov atom not found"
