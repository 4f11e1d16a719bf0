from __future__ import annotations

from pathlib import Path
import argparse

from windaep.config import MASTS, ACTIVE_MAST_KEY, DATA_LAKE, DEFAULT_HEIGHT, DEFAULT_YEAR
from windaep.logs import setup_logging
from windaep.sources import load_wind_speed

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Extract one clean year of mast wind speed from the NetCDF archive.")
    p.add_argument("--mast", default=ACTIVE_MAST_KEY, choices=sorted(MASTS.keys()))
    p.add_argument("--nc", default=None, help="NetCDF path (default data_lake/bronze/<mast>/<mast>_all.nc)")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="anemometer height (m)")
    p.add_argument("--year", type=int, default=DEFAULT_YEAR)
    return p.parse_args()

def main() -> int:
    setup_logging()
    args = parse_args()
    mast = MASTS[args.mast]
    if args.height not in mast.heights:
        raise ValueError(f"Height {args.height} m not measured at {mast.key}, choose from {mast.heights}")

    nc_path = Path(args.nc) if args.nc else Path(DATA_LAKE) / "bronze" / mast.key / f"{mast.key}_all.nc"
    variable = mast.variable(args.height)

    ws, rate = load_wind_speed(nc_path, variable, args.year, mast.time_zone)

    out_dir = Path(DATA_LAKE) / "gold" / "windspeed" / mast.key
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{variable}_{args.year}.parquet"
    ws.to_parquet(out_path, index=False)

    print("Mast  :", mast.name)
    print("NetCDF:", nc_path.name)
    print(f"Recovery rate: {rate:.7f}")
    print(f"{variable} stats:", ws["WindSpeed"].min(), ws["WindSpeed"].mean(), ws["WindSpeed"].max())
    print("Wrote wind speed parquet", out_path)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
