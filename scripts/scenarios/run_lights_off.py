from __future__ import annotations

import argparse
import logging
from pathlib import Path

from photosim.engine.config import SimulationConfig, load_config
from photosim.engine.simulator import ControlInputs, SimulationEngine
from photosim.export.history_csv import export_history_csv
from photosim.twin.scenario import ControlEvent, run_scenario

logger = logging.getLogger("photosim.scenarios")

DEFAULT_OUTPUT_DIR = Path("data/processed/scenarios")


def run_lights_off(
    *,
    config: SimulationConfig,
    settle_ticks: int,
    dark_ticks: int,
    output_dir: Path,
) -> tuple[Path, Path]:
    engine = SimulationEngine(
        config=config,
        controls=ControlInputs(
            light_intensity=config.response.standard_light,
            co2_level=config.response.standard_co2,
        ),
    )
    frames = run_scenario(
        n_ticks=settle_ticks + dark_ticks,
        events=[ControlEvent(tick=settle_ticks, toggle_light=True)],
        engine=engine,
    )
    output_dir.mkdir(parents=True, exist_ok=True)
    frames_path = output_dir / "lights_off_frames.parquet"
    frames.to_parquet(frames_path, index=False)
    history_path = export_history_csv(engine.history, output_dir / "lights_off_history.csv")

    final = frames.iloc[-1]
    logger.info(
        "After %.1fs: P_total=%.3f C3=%.1f C5=%.3f",
        final["time_s"],
        final["p_total"],
        final["c3"],
        final["c5"],
    )
    return frames_path, history_path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the lights-off teaching scenario and export its history."
    )
    parser.add_argument("--config", default=None, help="Optional JSON simulation config.")
    parser.add_argument(
        "--settle-ticks",
        type=int,
        default=600,
        help="Frames at the standard operating point before the light goes off.",
    )
    parser.add_argument(
        "--dark-ticks",
        type=int,
        default=1800,
        help="Frames simulated after the light goes off.",
    )
    parser.add_argument(
        "--output-dir",
        default=str(DEFAULT_OUTPUT_DIR),
        help="Directory where the parquet frames and CSV history are written.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else SimulationConfig()
    frames_path, history_path = run_lights_off(
        config=config,
        settle_ticks=args.settle_ticks,
        dark_ticks=args.dark_ticks,
        output_dir=Path(args.output_dir),
    )
    print(f"Wrote frames to: {frames_path}")
    print(f"Wrote history to: {history_path}")


if __name__ == "__main__":
    main()
