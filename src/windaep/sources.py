"""Input loaders: turbine power curve CSV and met mast NetCDF."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import xarray as xr

logger = logging.getLogger(__name__)


def is_url(source: str | Path) -> bool:
    return str(source).startswith(("http://", "https://"))


def load_power_curve(source: str | Path) -> pd.DataFrame:
    """
    Read a turbine power curve and keep the producing part of it.

    The first two columns are taken as wind speed (m/s) and power (kW),
    whatever their header says. Rows with zero power are dropped.
    """
    if not is_url(source) and not Path(source).exists():
        raise FileNotFoundError(f"Missing power curve file: {source}")

    raw = pd.read_csv(source)
    if raw.shape[1] < 2:
        raise ValueError(f"Power curve needs at least 2 columns, got {list(raw.columns)}")

    pc = raw.iloc[:, :2].copy()
    pc.columns = ["WindSpeed", "Power"]
    pc = pc.apply(pd.to_numeric, errors="coerce").dropna()
    pc = pc[pc["Power"] != 0].sort_values("WindSpeed").reset_index(drop=True)

    if len(pc) < 2:
        raise ValueError(f"Power curve from {source} has fewer than 2 non-zero power rows")

    logger.info("Power curve: %d points, %.2f-%.2f m/s, max %.0f kW",
                len(pc), pc["WindSpeed"].min(), pc["WindSpeed"].max(), pc["Power"].max())
    return pc


def get_time_name(ds: xr.Dataset) -> str:
    for cand in ("time", "valid_time"):
        if cand in ds.dims or cand in ds.coords:
            return cand
    raise KeyError(f"No time-like coord found. Coords={list(ds.coords)} Dims={list(ds.dims)}")


def open_mast(path: str | Path) -> xr.Dataset:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing met mast file: {path}")
    return xr.open_dataset(path)


def mast_wind_speed(ds: xr.Dataset, variable: str, year: int, time_zone: str) -> pd.DataFrame:
    """
    Wind speed records of one calendar year (local time), missing values kept.

    Decoded NetCDF times are naive and taken as UTC before conversion to
    the mast's time zone.
    """
    if variable not in ds.data_vars:
        raise KeyError(f"Expected variable {variable} not found. Present={list(ds.data_vars)}")

    tname = get_time_name(ds)
    da = ds[variable]
    # Single-point station files may carry length-1 height/position dims
    extra = [d for d in da.dims if d != tname and da.sizes[d] == 1]
    if extra:
        da = da.squeeze(dim=extra, drop=True)
    if da.dims != (tname,):
        raise ValueError(f"{variable} must be a 1-D series over {tname}, got dims {da.dims}")

    times = pd.DatetimeIndex(pd.to_datetime(da[tname].values))
    if times.tz is None:
        times = times.tz_localize("UTC")
    local = times.tz_convert(time_zone)

    df = pd.DataFrame({
        "DateTime": local,
        "WindSpeed": da.values.astype(float),
    })
    return df[df["DateTime"].dt.year == year].reset_index(drop=True)


def recovery_rate(ws: pd.Series) -> float:
    n = len(ws)
    if n == 0:
        return 0.0
    return 1.0 - float(ws.isna().sum()) / n


def clean_wind_speed(df: pd.DataFrame) -> pd.DataFrame:
    out = df.dropna(subset=["WindSpeed"]).reset_index(drop=True)
    if out.empty:
        raise ValueError("No valid wind speed records left after dropping missing values")
    return out


def load_wind_speed(path: str | Path, variable: str, year: int, time_zone: str) -> tuple[pd.DataFrame, float]:
    """Read, cut to `year` and clean one anemometer. Returns (records, recovery rate)."""
    ds = open_mast(path)
    try:
        raw = mast_wind_speed(ds, variable, year, time_zone)
    finally:
        ds.close()

    if raw.empty:
        raise ValueError(f"No {variable} records for year {year} in {path}")

    rate = recovery_rate(raw["WindSpeed"])
    ws = clean_wind_speed(raw)
    logger.info("%s %d: %d records, %d missing, recovery rate %.7f",
                variable, year, len(raw), len(raw) - len(ws), rate)
    logger.info("%s stats (m/s): min=%.2f mean=%.2f max=%.2f",
                variable, ws["WindSpeed"].min(), ws["WindSpeed"].mean(), ws["WindSpeed"].max())
    return ws, rate
