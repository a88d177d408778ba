import pytest

from imgassist.dimensions import (
    UNKNOWN,
    Both,
    HeightOnly,
    WidthOnly,
    backfill,
    compute_dims,
    dims_tag,
    from_fields,
    geometry,
    parse_geometry,
    round_half_up,
)
from imgassist.errors import DimensionError, ImageRefError, InvariantError


def test_round_half_up_rounds_ties_up():
    assert round_half_up(33 * 50, 100) == 17  # 16.5
    assert round_half_up(5, 2) == 3  # 2.5, where round() gives 2
    assert round_half_up(7, 2) == 4
    assert round_half_up(10, 3) == 3
    assert round_half_up(20, 3) == 7
    assert round_half_up(0, 5) == 0


def test_from_fields_variants():
    assert from_fields(None, None) is UNKNOWN
    assert from_fields(10, None) == WidthOnly(10)
    assert from_fields(None, 20) == HeightOnly(20)
    assert from_fields(10, 20) == Both(10, 20)


def test_width_only_scales_height():
    assert compute_dims(WidthOnly(50), (100, 40)) == (50, 20)
    assert compute_dims(WidthOnly(50), (100, 33)) == (50, 17)


def test_height_only_scales_width():
    assert compute_dims(HeightOnly(20), (100, 40)) == (50, 20)
    assert compute_dims(HeightOnly(50), (33, 100)) == (17, 50)


def test_both_with_matching_ratio_is_exact():
    assert compute_dims(Both(50, 20), (100, 40)) == (50, 20)
    assert compute_dims(Both(300, 200), (600, 400)) == (300, 200)


def test_both_with_inconsistent_ratio_stays_within_bounds():
    # Source is 2:1, requested box is square.
    assert compute_dims(Both(100, 100), (200, 100)) == (100, 50)
    assert compute_dims(Both(100, 100), (100, 200)) == (50, 100)


def test_both_equal_to_source_is_unchanged():
    assert compute_dims(backfill(UNKNOWN, (640, 480)), (640, 480)) == (640, 480)


def test_upscaling_follows_request():
    assert compute_dims(WidthOnly(200), (100, 40)) == (200, 80)


def test_unknown_request_is_an_invariant_violation():
    with pytest.raises(InvariantError):
        compute_dims(UNKNOWN, (10, 10))


@pytest.mark.parametrize("source", [(0, 10), (10, 0), (0, 0)])
def test_zero_source_dimension_is_rejected(source):
    with pytest.raises(DimensionError):
        compute_dims(WidthOnly(5), source)


def test_backfill_only_replaces_unknown():
    assert backfill(UNKNOWN, (30, 40)) == Both(30, 40)
    assert backfill(WidthOnly(5), (30, 40)) == WidthOnly(5)


def test_dims_tag_and_geometry():
    assert dims_tag(Both(40, 30)) == "40_30"
    assert dims_tag(WidthOnly(50)) == "w50"
    assert dims_tag(HeightOnly(7)) == "h7"
    assert geometry(Both(40, 30)) == "40x30"
    assert geometry(WidthOnly(50)) == "50x"
    assert geometry(HeightOnly(7)) == "x7"

    with pytest.raises(InvariantError):
        dims_tag(UNKNOWN)
    with pytest.raises(InvariantError):
        geometry(UNKNOWN)


def test_parse_geometry():
    assert parse_geometry("40x30") == Both(40, 30)
    assert parse_geometry("50x") == WidthOnly(50)
    assert parse_geometry("x7") == HeightOnly(7)
    for bad in ("x", "", "40", "ax3"):
        with pytest.raises(ValueError):
            parse_geometry(bad)


def test_invariant_error_is_not_an_input_error():
    assert not issubclass(InvariantError, ImageRefError)
    assert issubclass(DimensionError, ImageRefError)
