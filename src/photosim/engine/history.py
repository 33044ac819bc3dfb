from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from photosim.kinetics.response import ResponseOutputs

CHANNELS = ("time", "c3", "c5", "p_total", "energy", "precursor")


@dataclass(frozen=True)
class HistoryRow:
    time: float
    c3: float
    c5: float
    p_total: float
    energy: float
    precursor: float
    marker: str | None = None

    @staticmethod
    def from_outputs(
        time: float,
        outputs: ResponseOutputs,
        marker: str | None = None,
    ) -> HistoryRow:
        return HistoryRow(
            time=time,
            c3=outputs.fixation_intermediate,
            c5=outputs.regeneration_intermediate,
            p_total=outputs.net_production_rate,
            energy=outputs.energy_pool,
            precursor=outputs.precursor_pool,
            marker=marker,
        )


@dataclass(frozen=True)
class HistorySeries:
    """Chronologically ordered, read-only view of the rolling window."""

    time: np.ndarray
    c3: np.ndarray
    c5: np.ndarray
    p_total: np.ndarray
    energy: np.ndarray
    precursor: np.ndarray
    markers: tuple[str | None, ...]

    def __post_init__(self) -> None:
        lengths = {len(getattr(self, name)) for name in CHANNELS}
        lengths.add(len(self.markers))
        if len(lengths) != 1:
            msg = f"history sequences have mismatched lengths: {sorted(lengths)}"
            raise ValueError(msg)
        for name in CHANNELS:
            getattr(self, name).flags.writeable = False

    def __len__(self) -> int:
        return len(self.markers)

    def row(self, index: int) -> HistoryRow:
        return HistoryRow(
            time=float(self.time[index]),
            c3=float(self.c3[index]),
            c5=float(self.c5[index]),
            p_total=float(self.p_total[index]),
            energy=float(self.energy[index]),
            precursor=float(self.precursor[index]),
            marker=self.markers[index],
        )

    def marker_indices(self) -> list[int]:
        return [idx for idx, marker in enumerate(self.markers) if marker is not None]

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame({name: getattr(self, name) for name in CHANNELS})
        frame["marker"] = pd.Series(self.markers, dtype=object)
        return frame


class HistoryBuffer:
    """Fixed-capacity circular arena behind the rolling chart history.

    ``append`` overwrites the oldest slot in place and advances the cursor, so
    the window never grows or reallocates. Readers get ordered copies through
    :meth:`snapshot`.
    """

    def __init__(self, capacity: int = 1200, initial_row: HistoryRow | None = None) -> None:
        if capacity < 1:
            msg = "capacity must be positive"
            raise ValueError(msg)
        self.capacity = int(capacity)
        self._channels = {name: np.zeros(self.capacity, dtype=float) for name in CHANNELS}
        self._markers = np.full(self.capacity, None, dtype=object)
        # Index of the oldest slot, which is also the next slot written.
        self._cursor = 0
        self.reset(initial_row or HistoryRow(0.0, 0.0, 0.0, 0.0, 0.0, 0.0))

    def __len__(self) -> int:
        return self.capacity

    def _check_invariant(self) -> None:
        assert all(len(arr) == self.capacity for arr in self._channels.values())
        assert len(self._markers) == self.capacity

    def append(self, row: HistoryRow) -> None:
        slot = self._cursor
        for name in CHANNELS:
            self._channels[name][slot] = getattr(row, name)
        self._markers[slot] = row.marker
        self._cursor = (slot + 1) % self.capacity
        self._check_invariant()

    def reset(self, initial_row: HistoryRow) -> None:
        for name in CHANNELS:
            self._channels[name].fill(getattr(initial_row, name))
        self._markers.fill(None)
        self._cursor = 0
        self._check_invariant()

    def _ordered(self, values: np.ndarray) -> np.ndarray:
        return np.concatenate((values[self._cursor :], values[: self._cursor]))

    def latest(self) -> HistoryRow:
        slot = (self._cursor - 1) % self.capacity
        return HistoryRow(
            marker=self._markers[slot],
            **{name: float(self._channels[name][slot]) for name in CHANNELS},
        )

    def snapshot(self) -> HistorySeries:
        ordered = {name: self._ordered(self._channels[name]) for name in CHANNELS}
        markers = tuple(self._ordered(self._markers).tolist())
        return HistorySeries(markers=markers, **ordered)

    def to_frame(self) -> pd.DataFrame:
        return self.snapshot().to_frame()


__all__ = ["CHANNELS", "HistoryBuffer", "HistoryRow", "HistorySeries"]
