"""Annual energy production from a time series and from binned distributions."""

from __future__ import annotations

from typing import Mapping

import numpy as np
import pandas as pd

from windaep.config import SAMPLES_PER_HOUR
from windaep.loess import PowerCurveModel


def timeseries_power(ws: pd.DataFrame, model: PowerCurveModel) -> pd.DataFrame:
    out = ws.copy()
    out["Power_P"] = model.power(out["WindSpeed"].to_numpy())
    return out


def data_hours(n_records: int, samples_per_hour: int = SAMPLES_PER_HOUR) -> float:
    return n_records / samples_per_hour


def aep_power_curve(power_kw, samples_per_hour: int = SAMPLES_PER_HOUR) -> float:
    """Energy (MWh) of a power time series sampled `samples_per_hour` times an hour."""
    return float(np.sum(power_kw)) / 1000.0 / samples_per_hour


def capacity_factor(aep_mwh: float, n_records: int, rated_mw: float, samples_per_hour: int = SAMPLES_PER_HOUR) -> float:
    hours = data_hours(n_records, samples_per_hour)
    if hours <= 0 or rated_mw <= 0:
        return 0.0
    return aep_mwh / (hours * rated_mw)


def aep_from_pdf(power_kw, pdf, hours: float) -> float:
    """Mean power over the binned distribution (kW) times `hours`, in MWh."""
    power_kw = np.asarray(power_kw, dtype=float)
    pdf = np.asarray(pdf, dtype=float)
    if power_kw.shape != pdf.shape:
        raise ValueError(f"power and pdf must align, got {power_kw.shape} vs {pdf.shape}")
    return float(np.sum(power_kw * pdf)) / 1000.0 * hours


def aep_by_model(table: pd.DataFrame, model: PowerCurveModel, hours: float) -> dict[str, float]:
    """AEP (MWh) for every ``PDF_<model>`` column of a bin table."""
    power = model.power(table["WindSpeed"].to_numpy())
    return {
        col[len("PDF_"):]: aep_from_pdf(power, table[col].to_numpy(), hours)
        for col in table.columns
        if col.startswith("PDF_")
    }


def aep_summary(aep_pc: float, aep_models: Mapping[str, float]) -> pd.DataFrame:
    """Difference and ratio of each distribution's AEP to the power curve approach."""
    row = {"PowerCurve": aep_pc}
    for name, aep in aep_models.items():
        row[f"Diff_{name}"] = aep - aep_pc
    for name, aep in aep_models.items():
        row[f"Ratio_{name}"] = aep / aep_pc if aep_pc > 0 else np.nan
    return pd.DataFrame([row])
