import pytest

from photosim.engine.simulator import LIGHT_OFF_MARKER, SimulationEngine
from photosim.twin.scenario import ControlEvent, lights_off_scenario, run_scenario


def test_run_scenario_returns_expected_columns() -> None:
    df = run_scenario(
        n_ticks=120,
        events=[
            ControlEvent(tick=30, co2_level=200.0, marker="CO2 drop"),
            ControlEvent(tick=60, is_paused=True),
            ControlEvent(tick=90, is_paused=False),
        ],
    )

    expected_columns = {
        "tick",
        "time_s",
        "advanced",
        "smoothed_light",
        "smoothed_co2",
        "c3",
        "c5",
        "p_total",
        "energy",
        "precursor",
        "atp",
        "c3_display",
        "c5_display",
        "marker",
        "cum_production",
    }
    assert len(df) == 120
    assert expected_columns.issubset(set(df.columns))
    assert df["advanced"].sum() == 90
    assert df["marker"].notna().sum() == 1
    assert df.loc[30, "marker"] == "CO2 drop"
    assert (df["energy"] + df["precursor"]).round(9).eq(200.0).all()
    assert df["cum_production"].is_monotonic_increasing


def test_paused_frames_hold_time() -> None:
    df = run_scenario(n_ticks=20, events=[ControlEvent(tick=10, is_paused=True)])

    paused = df.iloc[10:]
    assert not paused["advanced"].any()
    assert paused["time_s"].nunique() == 1
    assert paused["time_s"].iloc[0] == pytest.approx(1.0)


def test_lights_off_scenario_shows_textbook_response() -> None:
    df = lights_off_scenario(settle_ticks=100, dark_ticks=2000)
    before = df.iloc[99]
    after = df.iloc[-1]

    assert df["marker"].tolist().count(LIGHT_OFF_MARKER) == 1
    assert df.loc[100, "marker"] == LIGHT_OFF_MARKER
    assert before["c3"] == pytest.approx(200.0)
    assert before["c5"] == pytest.approx(120.0)
    assert after["p_total"] < before["p_total"] * 0.01
    assert after["c5"] < before["c5"] * 0.01
    assert after["c3"] > before["c3"]
    assert df["smoothed_light"].iloc[100:].is_monotonic_decreasing


def test_scenario_can_drive_existing_engine() -> None:
    engine = SimulationEngine()
    run_scenario(n_ticks=15, events=[ControlEvent(tick=0, toggle_light=True)], engine=engine)

    assert engine.simulated_time == pytest.approx(1.5)
    assert engine.history.markers[-15] == LIGHT_OFF_MARKER


def test_scenario_argument_validation() -> None:
    with pytest.raises(ValueError):
        run_scenario(n_ticks=0)
    with pytest.raises(ValueError):
        ControlEvent(tick=-1)
    with pytest.raises(ValueError):
        ControlEvent(tick=1, toggle_light=True, is_light_on=False)
    with pytest.raises(ValueError):
        run_scenario(n_ticks=1, engine=SimulationEngine(), controls=SimulationEngine().controls)
