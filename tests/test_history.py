import numpy as np
import pytest

from photosim.engine.history import CHANNELS, HistoryBuffer, HistoryRow
from photosim.kinetics.response import reference_response


def _row(time: float, marker: str | None = None) -> HistoryRow:
    return HistoryRow(
        time=time,
        c3=time * 2,
        c5=time * 3,
        p_total=time * 4,
        energy=time * 5,
        precursor=time * 6,
        marker=marker,
    )


def test_length_stays_at_capacity_through_wraparound() -> None:
    buffer = HistoryBuffer(capacity=5)

    for step in range(13):
        buffer.append(_row(float(step)))
        series = buffer.snapshot()
        assert len(buffer) == 5
        assert len(series) == 5
        for name in CHANNELS:
            assert len(getattr(series, name)) == 5


def test_snapshot_is_chronological_after_wraparound() -> None:
    buffer = HistoryBuffer(capacity=4)
    for step in range(1, 8):
        buffer.append(_row(float(step)))

    series = buffer.snapshot()

    assert series.time.tolist() == [4.0, 5.0, 6.0, 7.0]
    assert series.precursor.tolist() == [24.0, 30.0, 36.0, 42.0]
    assert buffer.latest() == _row(7.0)


def test_reset_replicates_initial_row_and_clears_markers() -> None:
    buffer = HistoryBuffer(capacity=6)
    for step in range(9):
        buffer.append(_row(float(step), marker="event" if step % 2 else None))

    buffer.reset(HistoryRow.from_outputs(0.0, reference_response()))
    series = buffer.snapshot()
    expected = reference_response()

    assert np.all(series.time == 0.0)
    assert np.all(series.c3 == expected.fixation_intermediate)
    assert np.all(series.c5 == expected.regeneration_intermediate)
    assert np.all(series.p_total == expected.net_production_rate)
    assert np.all(series.energy == expected.energy_pool)
    assert np.all(series.precursor == expected.precursor_pool)
    assert series.markers == (None,) * 6


def test_markers_follow_their_rows() -> None:
    buffer = HistoryBuffer(capacity=4)
    buffer.append(_row(1.0))
    buffer.append(_row(2.0, marker="light off"))
    buffer.append(_row(3.0))

    series = buffer.snapshot()

    assert series.marker_indices() == [2]
    assert series.row(2).time == 2.0
    assert series.row(2).marker == "light off"


def test_snapshot_is_read_only_and_detached() -> None:
    buffer = HistoryBuffer(capacity=3)
    series = buffer.snapshot()

    with pytest.raises(ValueError):
        series.c3[0] = 5.0

    buffer.append(_row(9.0))
    assert series.time.tolist() == [0.0, 0.0, 0.0]


def test_to_frame_has_one_row_per_slot() -> None:
    buffer = HistoryBuffer(capacity=3)
    buffer.append(_row(1.0, marker="x"))

    frame = buffer.to_frame()

    assert list(frame.columns) == [*CHANNELS, "marker"]
    assert len(frame) == 3
    assert frame["marker"].tolist() == [None, None, "x"]
    assert frame["marker"].dtype == object
    assert frame["marker"].isna().sum() == 2


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)


def test_reset_takes_time_from_initial_row() -> None:
    buffer = HistoryBuffer(capacity=3)
    buffer.reset(_row(4.0))

    assert buffer.snapshot().time.tolist() == [4.0, 4.0, 4.0]
