from __future__ import annotations

from pathlib import Path
import argparse

from windaep.analysis import run_analysis
from windaep.config import (
    MASTS, ACTIVE_MAST_KEY, TURBINES, ACTIVE_TURBINE_KEY,
    DATA_LAKE, VIZ_DIR, DEFAULT_HEIGHT, DEFAULT_YEAR,
)
from windaep.logs import setup_logging

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compare Weibull and KDE wind speed distributions and their AEP.")
    p.add_argument("--mast", default=ACTIVE_MAST_KEY, choices=sorted(MASTS.keys()))
    p.add_argument("--turbine", default=ACTIVE_TURBINE_KEY, choices=sorted(TURBINES.keys()))
    p.add_argument("--nc", default=None, help="NetCDF path (default data_lake/bronze/<mast>/<mast>_all.nc)")
    p.add_argument("--csv", default=None, help="power curve CSV (default: downloaded bronze copy, else the turbine URL)")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="anemometer height (m)")
    p.add_argument("--year", type=int, default=DEFAULT_YEAR)
    p.add_argument("--log-level", default=None)
    return p.parse_args()

def main() -> int:
    args = parse_args()
    setup_logging(args.log_level)
    mast = MASTS[args.mast]
    t = TURBINES[args.turbine]

    nc_path = Path(args.nc) if args.nc else Path(DATA_LAKE) / "bronze" / mast.key / f"{mast.key}_all.nc"
    local = Path(DATA_LAKE) / "bronze" / "power_curves" / f"{t.key}.csv"
    source = args.csv or (local if local.exists() else t.power_curve_url)

    res = run_analysis(source, nc_path, height=args.height, year=args.year, mast=mast, turbine=t,
                       out_dir=DATA_LAKE, viz_dir=VIZ_DIR)

    print(f"Power curve: loess degree={res.model.degree} span={res.model.span:.2f} RMSE={res.model.rmse:.3f} kW")
    print(f"Recovery rate: {res.recovery_rate:.7f}")
    for name, fit in res.fits.items():
        print(f"{fit.label}: shape={fit.shape:.4f} scale={fit.scale:.4f}")
    for name, ks in res.ks.items():
        print(f"KS {name}: D={ks.statistic:.5f} p={ks.pvalue:.4f}")
    print(f"AEP power curve (truth): {res.aep_power_curve:.1f} MWh  CF={res.capacity_factor:.4f}")
    print(res.summary.to_string(index=False))
    for key, path in res.outputs.items():
        print(f"Wrote {key}:", path)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
