import pytest
from pydantic import ValidationError as PydanticValidationError

from media_slicer.models.media import EngineEntry, SegmentSpec
from media_slicer.services.segmenting import (
    archive_entry_name,
    archive_name,
    build_segment_command,
    engine_input_name,
    is_output_name,
    output_pattern,
    resolve_output_extension,
    segment_format_for,
    select_outputs,
)


@pytest.mark.unit
def test_segment_command_for_video():
    spec = SegmentSpec(segment_length_seconds=30, output_extension="mov")
    assert build_segment_command("My_Clip_2024.mov", spec) == [
        "-i", "My_Clip_2024.mov",
        "-f", "segment",
        "-segment_time", "30",
        "-c", "copy",
        "-reset_timestamps", "1",
        "-segment_format", "mp4",
        "out_%02d.mov",
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "ext, fmt",
    [("mp3", "mp3"), ("wav", "wav"), ("WAV", "wav"), ("aac", "adts"), ("mkv", "mp4"), ("m4a", "mp4")],
)
def test_segment_format(ext, fmt):
    assert segment_format_for(ext) == fmt


@pytest.mark.unit
def test_output_extension_defaults_to_mp4():
    assert resolve_output_extension("") == "mp4"
    assert resolve_output_extension("xyz") == "mp4"
    assert resolve_output_extension("MOV") == "MOV"
    assert output_pattern("mp3") == "out_%02d.mp3"


@pytest.mark.unit
def test_select_outputs_filters_and_sorts():
    entries = [
        EngineEntry(name=n)
        for n in ["out_02.mp4", "clip.mp4", "out_00.mp4", "out_01.mp3", "out_01.mp4", "other_00.mp4"]
    ]
    assert select_outputs(entries, "mp4") == ["out_00.mp4", "out_01.mp4", "out_02.mp4"]


@pytest.mark.unit
def test_two_digit_counter_sorts_lexicographically_past_99():
    names = [f"out_{i:02d}.mp4" for i in range(101)]
    ordered = select_outputs([EngineEntry(name=n) for n in names], "mp4")
    # the documented ceiling: out_100 sorts between out_10 and out_11
    assert ordered.index("out_100.mp4") == ordered.index("out_10.mp4") + 1


@pytest.mark.unit
def test_archive_names():
    assert archive_entry_name("My_Clip_2024", 1, "mov") == "My_Clip_2024_segment_01.mov"
    assert archive_entry_name("x", 12, "mp3") == "x_segment_12.mp3"
    assert archive_name("My_Clip_2024") == "My_Clip_2024_segments.zip"


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("out_00.mp4", True),
        ("out_123.mp4", True),
        ("out_take.mp4", False),
        ("out_0.mp4", False),
        ("out_00.mp4.part", False),
        ("out_01.mp3", False),
    ],
)
def test_is_output_name_matches_the_numbering_pattern(name, expected):
    assert is_output_name(name, "mp4") is expected


@pytest.mark.unit
def test_input_never_collides_with_segment_names():
    assert engine_input_name("clip.mp4") == "clip.mp4"
    assert engine_input_name("out_take.mp4") == "out_take.mp4"
    assert engine_input_name("out_00.mp4") == "in_out_00.mp4"
    assert not is_output_name(engine_input_name("out_00.mp4"))


@pytest.mark.unit
def test_select_outputs_skips_input_name():
    entries = [EngineEntry(name=n) for n in ["out_take.mp4", "out_01.mp4", "out_00.mp4"]]
    assert select_outputs(entries, "mp4", "out_take.mp4") == ["out_00.mp4", "out_01.mp4"]


@pytest.mark.unit
@pytest.mark.parametrize("length", [0, 3601])
def test_segment_spec_enforces_length_range(length):
    with pytest.raises(PydanticValidationError):
        SegmentSpec(segment_length_seconds=length, output_extension="mp4")
