from __future__ import annotations

from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.ticker import PercentFormatter

from windaep.config import FINAL_DPI, FINAL_FIGSIZE
from windaep.distributions import KSResult
from windaep.loess import PowerCurveModel

# Darjeeling1 palette
RED = "#FF0000"
CYAN = "#00A08A"
ORANGE = "#F2AD00"

MODEL_STYLE = {
    "KDE": {"color": RED, "linestyle": "-"},
    "Weibull_MLE": {"color": CYAN, "linestyle": "--"},
    "Weibull_MGE": {"color": ORANGE, "linestyle": "-."},
    "Empirical": {"color": "black", "linestyle": "-"},
}

def _save(out_path: Path, dpi: int = 180) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=dpi, bbox_inches="tight")
    plt.close()
    return out_path

def plot_power_curve_fit(pc: pd.DataFrame, model: PowerCurveModel, title: str, out_path: Path) -> Path:
    v = pc["WindSpeed"].to_numpy()
    plt.figure()
    plt.scatter(v, pc["Power"], color="darkcyan", alpha=0.75, s=12, label="Observation")
    plt.plot(v, model.predict(v), color="tomato", alpha=0.75, label="LOESS Fit")
    plt.title(title)
    plt.xlabel("Wind Speed (m/s)")
    plt.ylabel("Power (kW)")
    plt.xticks(np.arange(0, np.ceil(v.max()) + 1, 1))
    plt.grid(alpha=0.3)
    plt.legend(frameon=False)
    return _save(out_path)

def _pdf_axes(table: pd.DataFrame, models: list[str], lw: float) -> plt.Axes:
    ax = plt.gca()
    ax.bar(table["WindSpeed"], table["Prob"], width=0.4, color="royalblue", label="Empirical")
    for name in models:
        ax.plot(table["WindSpeed"], table[f"PDF_{name}"], lw=lw, label=f"PDF_{name}", **MODEL_STYLE[name])
    ax.yaxis.set_major_formatter(PercentFormatter(xmax=1.0, decimals=1))
    ax.set_xticks(np.arange(0, np.ceil(table["BinUpper"].max()) + 1, 1))
    ax.set_xlabel("Wind Speed (m/s)")
    ax.set_ylabel("Probability (%)")
    ax.grid(alpha=0.3)
    return ax

def model_columns(table: pd.DataFrame, prefix: str = "PDF_") -> list[str]:
    order = ["KDE", "Weibull_MLE", "Weibull_MGE"]
    present = [c[len(prefix):] for c in table.columns if c.startswith(prefix)]
    return [m for m in order if m in present] + [m for m in present if m not in order]

def plot_pdf_comparison(table: pd.DataFrame, out_path: Path, include_kde: bool = True) -> Path:
    models = [m for m in model_columns(table) if include_kde or m != "KDE"]
    plt.figure(figsize=(10, 6))
    _pdf_axes(table, models, lw=1.2)
    if include_kde:
        plt.title("Comparison of Weibull and KDE with the Empirical Distribution")
    else:
        plt.title("Comparison of Weibull with the Empirical Distribution")
    plt.legend(frameon=False)
    return _save(out_path)

def plot_cdf_comparison(grid: pd.DataFrame, out_path: Path) -> Path:
    plt.figure(figsize=(10, 6))
    for name in model_columns(grid, prefix="CDF_"):
        if name == "Empirical":
            continue
        plt.plot(grid["WindSpeed"], grid[f"CDF_{name}"], label=f"CDF_{name}", **MODEL_STYLE.get(name, {}))
    plt.plot(grid["WindSpeed"], grid["CDF_Empirical"], label="CDF_Empirical", **MODEL_STYLE["Empirical"])
    ax = plt.gca()
    ax.yaxis.set_major_formatter(PercentFormatter(xmax=1.0, decimals=0))
    plt.yticks(np.arange(0, 1.01, 0.1))
    plt.xticks(np.arange(0, grid["WindSpeed"].max() + 0.01, 2))
    plt.title("Comparison Between Empirical and KDE, Different Weibull CDFs")
    plt.xlabel("Wind Speed (m/s)")
    plt.ylabel("CDF")
    plt.grid(alpha=0.3)
    plt.legend(frameon=False)
    return _save(out_path)

def plot_final(
    table: pd.DataFrame,
    ks: Mapping[str, KSResult],
    aep_pc: float,
    aep_models: Mapping[str, float],
    subtitle: str,
    out_path: Path,
) -> Path:
    """PDF comparison annotated with KS statistics and AEP per model."""
    plt.figure(figsize=FINAL_FIGSIZE)
    ax = _pdf_axes(table, model_columns(table), lw=1.6)

    x_text = 0.98
    lines = [(f"KS Stat {name.replace('_', '-')}: {res.statistic:.5f}", name) for name, res in ks.items()]
    lines.append((f"AEP PC Assumpt. (Truth): {aep_pc:.1f} MWh", None))
    lines += [(f"AEP {name.replace('Weibull_', 'Weib ')}: {aep:.1f} MWh", name) for name, aep in aep_models.items()]
    for i, (text, name) in enumerate(lines):
        ax.text(x_text, 0.95 - i * 0.05, text, transform=ax.transAxes, ha="right", va="top",
                color="red" if name == "KDE" else "black")

    plt.suptitle("PDF's of Weibull and KDE with the Empirical Distribution")
    plt.title(subtitle, fontsize=10)
    plt.legend(frameon=False, loc="upper left")
    return _save(out_path, dpi=FINAL_DPI)
