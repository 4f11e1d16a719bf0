from __future__ import annotations

from pathlib import Path
import argparse

import pandas as pd

from windaep.config import TURBINES, ACTIVE_TURBINE_KEY, DATA_LAKE
from windaep.logs import setup_logging

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Download a reference turbine power curve CSV.")
    p.add_argument("--turbine", default=ACTIVE_TURBINE_KEY, choices=sorted(TURBINES.keys()))
    p.add_argument("--url", default=None, help="override the turbine's power curve URL")
    return p.parse_args()


def main() -> int:
    setup_logging()
    args = parse_args()
    t = TURBINES[args.turbine]
    url = args.url or t.power_curve_url

    out_dir = Path(DATA_LAKE) / "bronze" / "power_curves"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{t.key}.csv"

    print(f"Requesting power curve: {t.name}")
    print("URL:", url)

    raw = pd.read_csv(url)
    raw.to_csv(out_path, index=False)

    print(raw.head(15).to_string(index=False))
    print("Download complete", out_path)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
