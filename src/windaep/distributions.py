"""Wind speed distributions: empirical bins, Weibull fits, KDE and KS tests.

Model names used as column suffixes throughout: ``Weibull_MLE``,
``Weibull_MGE`` and ``KDE``. Bin-aligned columns are ``Density_<model>``
(raw density at the bin midpoint) and ``PDF_<model>`` (the same, normalised
to sum to one over the bins so it compares with the empirical ``Prob``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy import optimize, stats

from windaep.config import BIN_WIDTH, KDE_WIDTH, KS_GRID_START, KS_GRID_STEP, KS_GRID_STOP, KS_KDE_WIDTH

logger = logging.getLogger(__name__)

WEIBULL_METHODS = ("mle", "mge")


@dataclass(frozen=True)
class WeibullFit:
    method: str
    shape: float
    scale: float

    @property
    def label(self) -> str:
        return f"Weibull_{self.method.upper()}"

    def pdf(self, x) -> NDArray[np.floating]:
        return stats.weibull_min.pdf(np.asarray(x, dtype=float), self.shape, scale=self.scale)

    def cdf(self, x) -> NDArray[np.floating]:
        return stats.weibull_min.cdf(np.asarray(x, dtype=float), self.shape, scale=self.scale)


@dataclass(frozen=True)
class KSResult:
    statistic: float
    pvalue: float


def _positive(ws) -> NDArray[np.floating]:
    ws = np.asarray(ws, dtype=float)
    pos = ws[np.isfinite(ws) & (ws > 0)]
    if len(pos) < 2:
        raise ValueError("At least 2 positive wind speed values are required to fit a Weibull distribution.")
    return pos


def fit_weibull(ws, method: str = "mle") -> WeibullFit:
    """
    Two-parameter Weibull fit (location fixed at 0).

    ``mle``: maximum likelihood. ``mge``: maximum goodness-of-fit, i.e. the
    (shape, scale) that minimise the one-sample Kolmogorov-Smirnov distance,
    searched with Nelder-Mead from the MLE estimate.
    """
    if method not in WEIBULL_METHODS:
        raise ValueError(f"Unknown Weibull fitting method {method!r}, expected one of {WEIBULL_METHODS}")

    pos = _positive(ws)
    shape, _, scale = stats.weibull_min.fit(pos, floc=0.0)

    if method == "mge":
        def ks_distance(log_params: NDArray[np.floating]) -> float:
            k, c = np.exp(log_params)
            return stats.kstest(pos, stats.weibull_min(k, scale=c).cdf).statistic

        res = optimize.minimize(
            ks_distance,
            x0=np.log([shape, scale]),
            method="Nelder-Mead",
            options={"xatol": 1e-6, "fatol": 1e-9, "maxiter": 2000},
        )
        shape, scale = np.exp(res.x)

    fit = WeibullFit(method=method, shape=float(shape), scale=float(scale))
    logger.info("%s: shape k=%.4f scale A=%.4f m/s", fit.label, fit.shape, fit.scale)
    return fit


def ecdf(ws):
    """Right-continuous empirical CDF of the sample, as a callable."""
    return stats.ecdf(np.asarray(ws, dtype=float)).cdf.evaluate


def bin_breaks(max_ws: float, bin_width: float = BIN_WIDTH) -> NDArray[np.floating]:
    n_bins = max(int(np.floor((max_ws + bin_width) / bin_width)), 1)
    breaks = np.arange(n_bins + 1) * bin_width
    if breaks[-1] < max_ws:
        breaks = np.append(breaks, breaks[-1] + bin_width)
    return breaks


def empirical_table(ws, bin_width: float = BIN_WIDTH) -> pd.DataFrame:
    """
    Fixed-width histogram of the wind speeds, from 0 to the first break at or
    above the maximum. Bins are (lower, upper]; the first bin also holds
    calm (0 m/s) records. Empty bins are kept with a zero count.
    """
    ws = np.asarray(ws, dtype=float)
    if ws.size == 0:
        raise ValueError("Cannot build an empirical distribution from an empty sample")
    if not np.all(np.isfinite(ws)):
        raise ValueError("Wind speeds must be finite, drop missing values first")
    if np.any(ws < 0):
        raise ValueError("Wind speeds must be non-negative")

    breaks = bin_breaks(float(ws.max()), bin_width)
    bins = pd.cut(ws, breaks, right=True, include_lowest=True)
    freq = pd.Series(ws).groupby(bins, observed=False).size().to_numpy()

    table = pd.DataFrame({
        "BinLower": breaks[:-1],
        "BinUpper": breaks[1:],
        "Freq": freq,
    })
    table["WindSpeed"] = (table["BinLower"] + table["BinUpper"]) / 2
    table["Prob"] = table["Freq"] / table["Freq"].sum()
    table["CDF"] = table["Prob"].cumsum()
    table["CDF_ECDF"] = ecdf(ws)(table["BinUpper"].to_numpy())
    return table


def kde_density(ws, points, width: float = KDE_WIDTH) -> NDArray[np.floating]:
    """Gaussian KDE with kernel standard deviation ``width / 4``, evaluated at `points`."""
    ws = np.asarray(ws, dtype=float)
    sd = np.std(ws, ddof=1)
    if not sd > 0:
        raise ValueError("KDE needs a sample with non-zero spread")
    # gaussian_kde scales its factor by the sample standard deviation
    kde = stats.gaussian_kde(ws, bw_method=(width / 4.0) / sd)
    return kde(np.asarray(points, dtype=float))


def weibull_bin_pdf(table: pd.DataFrame, fit: WeibullFit) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """Density at the bin midpoints, and the same normalised over the bins."""
    dens = fit.pdf(table["WindSpeed"].to_numpy())
    return dens, dens / dens.sum()


def add_model_pdfs(table: pd.DataFrame, fits: Iterable[WeibullFit], ws, width: float = KDE_WIDTH) -> pd.DataFrame:
    out = table.copy()
    mid = out["WindSpeed"].to_numpy()

    for fit in fits:
        dens, pdf = weibull_bin_pdf(out, fit)
        out[f"Density_{fit.label}"] = dens
        out[f"PDF_{fit.label}"] = pdf

    dens = kde_density(ws, mid, width)
    out["Density_KDE"] = dens
    out["PDF_KDE"] = dens / dens.sum()
    return out


def cdf_grid(
    ws,
    fits: Iterable[WeibullFit],
    start: float = KS_GRID_START,
    stop: float = KS_GRID_STOP,
    step: float = KS_GRID_STEP,
    kde_width: float = KS_KDE_WIDTH,
) -> pd.DataFrame:
    """Model and empirical CDFs on a fine, regular wind speed grid."""
    ws = np.asarray(ws, dtype=float)
    n = int(round((stop - start) / step)) + 1
    grid = pd.DataFrame({"WindSpeed": np.round(start + step * np.arange(n), 10)})
    x = grid["WindSpeed"].to_numpy()

    for fit in fits:
        grid[f"CDF_{fit.label}"] = fit.cdf(x)

    dens = kde_density(ws, x, kde_width)
    grid["CDF_KDE"] = np.cumsum(dens / dens.sum())
    grid["CDF_Empirical"] = ecdf(ws)(x)
    return grid


def ks_tests(grid: pd.DataFrame, reference: str = "CDF_Empirical") -> dict[str, KSResult]:
    """Two-sample KS test of every model CDF column against the empirical one."""
    if reference not in grid.columns:
        raise KeyError(f"Missing {reference} in CDF grid. Columns={list(grid.columns)}")

    results = {}
    for col in grid.columns:
        if not col.startswith("CDF_") or col == reference:
            continue
        res = stats.ks_2samp(grid[col].to_numpy(), grid[reference].to_numpy())
        name = col[len("CDF_"):]
        results[name] = KSResult(statistic=float(res.statistic), pvalue=float(res.pvalue))
        logger.info("KS %s vs empirical: D=%.5f p=%.4f", name, res.statistic, res.pvalue)
    return results
