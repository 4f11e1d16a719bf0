from __future__ import annotations

from pathlib import Path
import argparse

from windaep.config import TURBINES, ACTIVE_TURBINE_KEY, DATA_LAKE, VIZ_DIR, LOESS_DEGREES, LOESS_SPANS
from windaep.logs import setup_logging
from windaep.loess import fit_power_curve
from windaep.plots import plot_power_curve_fit
from windaep.sources import load_power_curve

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fit a loess power curve model with a degree/span grid search.")
    p.add_argument("--turbine", default=ACTIVE_TURBINE_KEY, choices=sorted(TURBINES.keys()))
    p.add_argument("--csv", default=None, help="power curve CSV (default: downloaded bronze copy, else the turbine URL)")
    return p.parse_args()

def main() -> int:
    setup_logging()
    args = parse_args()
    t = TURBINES[args.turbine]

    local = Path(DATA_LAKE) / "bronze" / "power_curves" / f"{t.key}.csv"
    source = args.csv or (local if local.exists() else t.power_curve_url)

    pc = load_power_curve(source)
    model = fit_power_curve(pc, LOESS_DEGREES, LOESS_SPANS)

    out_dir = Path(DATA_LAKE) / "gold" / "power_curves"
    out_dir.mkdir(parents=True, exist_ok=True)
    grid_path = out_dir / f"loess_grid_{t.key}.csv"
    model.grid.to_csv(grid_path, index=False)

    fitted = pc.assign(Power_P=model.predict(pc["WindSpeed"].to_numpy()))
    fit_path = out_dir / f"loess_fit_{t.key}.csv"
    fitted.to_csv(fit_path, index=False)

    plot_path = plot_power_curve_fit(pc, model, t.name, Path(VIZ_DIR) / "power" / f"{t.key}_loess_fit.png")

    print(model.grid.sort_values("RMSE").head(10).to_string(index=False))
    print(f"Best: degree={model.degree} span={model.span:.2f} RMSE={model.rmse:.3f} kW")
    print("Wrote grid:", grid_path)
    print("Wrote fit :", fit_path)
    print("Plot:", plot_path)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
