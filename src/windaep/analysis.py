"""The full comparison, run once top to bottom.

power curve CSV -> mast NetCDF -> one clean year -> loess power curve ->
Weibull (MLE, MGE) -> empirical bins + KDE -> KS tests -> AEP per model ->
tables and figures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from windaep import distributions, energy, plots
from windaep.config import (
    ACTIVE_MAST,
    ACTIVE_TURBINE,
    BIN_WIDTH,
    DATA_LAKE,
    DEFAULT_HEIGHT,
    DEFAULT_YEAR,
    KDE_WIDTH,
    LOESS_DEGREES,
    LOESS_SPANS,
    SAMPLES_PER_HOUR,
    VIZ_DIR,
    MetMast,
    Turbine,
)
from windaep.loess import PowerCurveModel, fit_power_curve
from windaep.sources import load_power_curve, load_wind_speed

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    power_curve: pd.DataFrame
    model: PowerCurveModel
    wind_speed: pd.DataFrame
    recovery_rate: float
    fits: dict[str, distributions.WeibullFit]
    table: pd.DataFrame
    cdf_grid: pd.DataFrame
    ks: dict[str, distributions.KSResult]
    aep_power_curve: float
    capacity_factor: float
    aep_models: dict[str, float]
    summary: pd.DataFrame
    outputs: dict[str, Path] = field(default_factory=dict)


def run_analysis(
    power_curve_source: str | Path,
    nc_path: str | Path,
    height: int = DEFAULT_HEIGHT,
    year: int = DEFAULT_YEAR,
    mast: MetMast = ACTIVE_MAST,
    turbine: Turbine = ACTIVE_TURBINE,
    out_dir: str | Path = DATA_LAKE,
    viz_dir: str | Path = VIZ_DIR,
) -> AnalysisResult:
    if height not in mast.heights:
        raise ValueError(f"Height {height} m not measured at {mast.key}, choose from {mast.heights}")

    out_dir = Path(out_dir) / "gold" / "aep" / mast.key
    viz_dir = Path(viz_dir) / "aep"
    tag = f"{turbine.key}_{mast.key}_{height}m_{year}"
    outputs: dict[str, Path] = {}

    # Power curve model
    pc = load_power_curve(power_curve_source)
    model = fit_power_curve(pc, LOESS_DEGREES, LOESS_SPANS)
    outputs["power_curve_plot"] = plots.plot_power_curve_fit(
        pc, model, turbine.name, viz_dir / f"{turbine.key}_loess_fit.png")

    # Wind speed at hub height, AEP of the time series ("truth")
    ws, rate = load_wind_speed(nc_path, mast.variable(height), year, mast.time_zone)
    ws = energy.timeseries_power(ws, model)
    n = len(ws)
    aep_pc = energy.aep_power_curve(ws["Power_P"], SAMPLES_PER_HOUR)
    cf_pc = energy.capacity_factor(aep_pc, n, turbine.rated_power_mw, SAMPLES_PER_HOUR)
    logger.info("Power curve approach: AEP=%.1f MWh CF=%.4f", aep_pc, cf_pc)

    # Distributions
    values = ws["WindSpeed"].to_numpy()
    fits = {m: distributions.fit_weibull(values, m) for m in distributions.WEIBULL_METHODS}
    table = distributions.empirical_table(values, BIN_WIDTH)
    table = distributions.add_model_pdfs(table, fits.values(), values, KDE_WIDTH)
    grid = distributions.cdf_grid(values, fits.values())
    ks = distributions.ks_tests(grid)

    # AEP per distribution over the hours actually covered by the data
    hours = energy.data_hours(n, SAMPLES_PER_HOUR)
    aep_models = energy.aep_by_model(table, model, hours)
    summary = energy.aep_summary(aep_pc, aep_models)
    for name, aep in aep_models.items():
        logger.info("AEP %s: %.1f MWh (%+.1f MWh vs power curve)", name, aep, aep - aep_pc)

    out_dir.mkdir(parents=True, exist_ok=True)
    outputs["distribution_table"] = out_dir / f"distribution_{tag}.parquet"
    table.to_parquet(outputs["distribution_table"], index=False)
    outputs["cdf_grid"] = out_dir / f"cdf_grid_{tag}.parquet"
    grid.to_parquet(outputs["cdf_grid"], index=False)
    outputs["summary"] = out_dir / f"aep_summary_{tag}.csv"
    summary.assign(CapacityFactor=cf_pc, RecoveryRate=rate).to_csv(outputs["summary"], index=False)

    outputs["weibull_plot"] = plots.plot_pdf_comparison(
        table, viz_dir / f"pdf_weibull_{tag}.png", include_kde=False)
    outputs["pdf_plot"] = plots.plot_pdf_comparison(table, viz_dir / f"pdf_weibull_kde_{tag}.png")
    outputs["cdf_plot"] = plots.plot_cdf_comparison(grid, viz_dir / f"cdf_{tag}.png")
    outputs["final_plot"] = plots.plot_final(
        table, ks, aep_pc, aep_models,
        subtitle=f"Data: {mast.name} @{height}m height ({year})",
        out_path=viz_dir / f"final_plot_{tag}.jpeg",
    )

    return AnalysisResult(
        power_curve=pc,
        model=model,
        wind_speed=ws,
        recovery_rate=rate,
        fits=fits,
        table=table,
        cdf_grid=grid,
        ks=ks,
        aep_power_curve=aep_pc,
        capacity_factor=cf_pc,
        aep_models=aep_models,
        summary=summary,
        outputs=outputs,
    )
