"""Local polynomial regression (loess) for turbine power curves.

Each prediction is a weighted least-squares polynomial fit of degree 0, 1 or
2 over the ``floor(n * span)`` nearest observations, weighted with the
tricube kernel. There is no extrapolation: predictions outside the range of
the fitted wind speeds are ``NaN``, and :meth:`PowerCurveModel.power` turns
those into zero output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
import pandas as pd
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class Loess:
    def __init__(self, span: float = 0.75, degree: int = 2):
        if not span > 0:
            raise ValueError(f"span must be positive, got {span}")
        if degree not in (0, 1, 2):
            raise ValueError(f"degree must be 0, 1 or 2, got {degree}")
        self.span = float(span)
        self.degree = int(degree)
        self.x_: NDArray[np.floating] | None = None
        self.y_: NDArray[np.floating] | None = None

    def fit(self, x, y) -> "Loess":
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"x and y must be 1-D arrays of equal length, got {x.shape} vs {y.shape}")
        if len(x) < self.degree + 1:
            raise ValueError(f"Need at least {self.degree + 1} points for degree {self.degree}, got {len(x)}")
        order = np.argsort(x, kind="stable")
        self.x_ = x[order]
        self.y_ = y[order]
        return self

    def _n_neighbours(self) -> int:
        n = len(self.x_)
        q = int(np.floor(n * self.span))
        return min(max(q, self.degree + 1), n)

    def _local_fit(self, x0: float) -> float:
        dist = np.abs(self.x_ - x0)
        q = self._n_neighbours()
        order = np.argsort(dist, kind="stable")
        idx = order[:q]

        # Bandwidth halfway to the next neighbour so all q points keep weight
        if q < len(dist):
            h = 0.5 * (dist[order[q - 1]] + dist[order[q]])
        else:
            h = dist[order[q - 1]] * max(self.span, 1.0)
        if h <= 0:
            return float(np.mean(self.y_[dist == 0]))

        u = dist[idx] / h
        w = np.where(u < 1.0, (1.0 - u**3) ** 3, 0.0)

        # Centered design: the intercept is the fitted value at x0
        dx = self.x_[idx] - x0
        X = np.vander(dx, self.degree + 1, increasing=True)
        sw = np.sqrt(w)
        beta, *_ = np.linalg.lstsq(X * sw[:, None], self.y_[idx] * sw, rcond=None)
        return float(beta[0])

    def predict(self, x_new) -> NDArray[np.floating]:
        if self.x_ is None:
            raise RuntimeError("Loess model is not fitted")
        x_new = np.asarray(x_new, dtype=float)
        flat = x_new.ravel()
        out = np.full(flat.shape, np.nan)

        inside = np.isfinite(flat) & (flat >= self.x_[0]) & (flat <= self.x_[-1])
        # Records repeat a lot (instrument resolution), fit each distinct speed once
        uniq, inverse = np.unique(flat[inside], return_inverse=True)
        fitted = np.array([self._local_fit(v) for v in uniq])
        if len(uniq):
            out[inside] = fitted[inverse]
        return out.reshape(x_new.shape)


def rmse(observed, predicted) -> float:
    observed = np.asarray(observed, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    return float(np.sqrt(np.mean((predicted - observed) ** 2)))


def grid_search(x, y, degrees: Iterable[int], spans: Iterable[float]) -> pd.DataFrame:
    """In-sample RMSE of every (degree, span) pair, degree varying fastest."""
    spans = list(spans)
    degrees = list(degrees)
    rows = []
    for span in spans:
        for degree in degrees:
            model = Loess(span=span, degree=degree).fit(x, y)
            rows.append({"degree": degree, "span": span, "RMSE": rmse(y, model.predict(x))})
    return pd.DataFrame(rows)


@dataclass
class PowerCurveModel:
    model: Loess
    degree: int
    span: float
    rmse: float
    grid: pd.DataFrame = field(repr=False)

    def predict(self, wind_speed) -> NDArray[np.floating]:
        return self.model.predict(wind_speed)

    def power(self, wind_speed) -> NDArray[np.floating]:
        """Power (kW); zero outside the fitted wind-speed range."""
        return np.nan_to_num(self.predict(wind_speed), nan=0.0)


def fit_power_curve(pc: pd.DataFrame, degrees: Iterable[int], spans: Iterable[float]) -> PowerCurveModel:
    x = pc["WindSpeed"].to_numpy(dtype=float)
    y = pc["Power"].to_numpy(dtype=float)

    grid = grid_search(x, y, degrees, spans)
    best = grid.loc[grid["RMSE"].idxmin()]
    degree, span = int(best["degree"]), float(best["span"])

    model = Loess(span=span, degree=degree).fit(x, y)
    logger.info("Loess power curve: degree=%d span=%.2f RMSE=%.3f kW (%d candidates)",
                degree, span, best["RMSE"], len(grid))
    return PowerCurveModel(model=model, degree=degree, span=span, rmse=float(best["RMSE"]), grid=grid)
