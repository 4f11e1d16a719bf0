"""Shared fixtures: synthetic power curve, wind speeds and a small mast archive."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import xarray as xr

RATED_KW = 3300.0
CUT_IN = 3.0
RATED_SPEED = 12.0
CUT_OUT = 25.0


def cubic_curve(v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    p = RATED_KW * (v**3 - CUT_IN**3) / (RATED_SPEED**3 - CUT_IN**3)
    p = np.where(v >= RATED_SPEED, RATED_KW, p)
    return np.where((v < CUT_IN) | (v > CUT_OUT), 0.0, p)


@pytest.fixture
def power_curve_df() -> pd.DataFrame:
    v = np.arange(CUT_IN + 0.25, CUT_OUT + 0.001, 0.25)
    return pd.DataFrame({"WindSpeed": v, "Power": cubic_curve(v)})


@pytest.fixture
def power_curve_csv(tmp_path: Path) -> Path:
    """NREL-style CSV: extra columns and zero-power rows below cut-in."""
    v = np.arange(0.0, CUT_OUT + 0.001, 0.25)
    df = pd.DataFrame({
        "Wind Speed [m/s]": v,
        "Power [kW]": cubic_curve(v),
        "Cp [-]": 0.45,
    })
    path = tmp_path / "power_curve.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def wind_speeds() -> np.ndarray:
    """Weibull k=2, A=8 m/s sample, rounded like cup anemometer records."""
    rng = np.random.default_rng(42)
    return np.round(rng.weibull(2.0, size=5000) * 8.0, 2)


@pytest.fixture
def mast_nc(tmp_path: Path) -> Path:
    """Two months of 10 minute records spanning the 1996/1997 new year (UTC)."""
    rng = np.random.default_rng(7)
    time = pd.date_range("1996-12-30 00:00", "1997-03-01 00:00", freq="10min")
    n = len(time)

    ws125 = np.round(rng.weibull(2.0, size=n) * 8.5, 2)
    ws125[rng.choice(n, size=12, replace=False)] = np.nan
    ws44 = np.round(ws125 * 0.8, 2)

    ds = xr.Dataset(
        {
            "ws125": ("time", ws125, {"units": "m/s"}),
            "ws44": ("time", ws44, {"units": "m/s"}),
        },
        coords={"time": time},
    )
    path = tmp_path / "risoe_m_all.nc"
    ds.to_netcdf(path, encoding={"time": {"units": "minutes since 1995-11-20 16:25:00", "dtype": "float64"}})
    return path
