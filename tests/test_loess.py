"""Tests for the loess power curve model."""
import numpy as np
import pytest

from windaep.config import LOESS_DEGREES, LOESS_SPANS
from windaep.loess import Loess, fit_power_curve, grid_search, rmse


class TestLoess:
    def test_quadratic_reproduced_by_degree_2(self):
        x = np.linspace(0.0, 10.0, 41)
        y = 3.0 + 0.5 * x - 0.2 * x**2
        model = Loess(span=0.2, degree=2).fit(x, y)
        x_new = np.array([0.0, 0.3, 4.9, 7.77, 10.0])
        np.testing.assert_allclose(model.predict(x_new), 3.0 + 0.5 * x_new - 0.2 * x_new**2, atol=1e-8)

    def test_line_reproduced_by_degree_1(self):
        x = np.linspace(2.0, 6.0, 30)
        model = Loess(span=0.3, degree=1).fit(x, 2.0 * x - 1.0)
        np.testing.assert_allclose(model.predict([2.5, 5.5]), [4.0, 10.0], atol=1e-8)

    def test_degree_0_is_local_mean(self):
        x = np.arange(10.0)
        model = Loess(span=0.5, degree=0).fit(x, np.full(10, 7.0))
        np.testing.assert_allclose(model.predict(x), 7.0)

    def test_unsorted_input(self):
        rng = np.random.default_rng(3)
        x = rng.permutation(np.linspace(0.0, 5.0, 25))
        model = Loess(span=0.4, degree=1).fit(x, x)
        np.testing.assert_allclose(model.predict([1.0, 4.0]), [1.0, 4.0], atol=1e-8)

    def test_no_extrapolation(self):
        x = np.linspace(3.0, 25.0, 50)
        model = Loess(span=0.3, degree=2).fit(x, x**2)
        pred = model.predict([0.0, 2.99, 3.0, 25.0, 25.01, np.nan])
        assert np.isnan(pred[[0, 1, 4, 5]]).all()
        assert np.isfinite(pred[[2, 3]]).all()

    def test_predict_keeps_shape(self):
        x = np.linspace(0.0, 1.0, 20)
        model = Loess(span=0.5, degree=1).fit(x, x)
        assert model.predict(np.zeros((2, 3))).shape == (2, 3)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            Loess(span=0.0)
        with pytest.raises(ValueError):
            Loess(degree=3)

    def test_too_few_points(self):
        with pytest.raises(ValueError, match="at least 3"):
            Loess(span=0.5, degree=2).fit([1.0, 2.0], [1.0, 2.0])

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError):
            Loess().predict([1.0])


class TestGridSearch:
    def test_span_grid(self):
        assert LOESS_SPANS[0] == pytest.approx(0.05)
        assert LOESS_SPANS[-1] == pytest.approx(0.5)
        assert len(LOESS_SPANS) == 14

    def test_every_pair_degree_fastest(self, power_curve_df):
        grid = grid_search(power_curve_df["WindSpeed"], power_curve_df["Power"], LOESS_DEGREES, LOESS_SPANS)
        assert len(grid) == len(LOESS_DEGREES) * len(LOESS_SPANS)
        assert list(grid["degree"][:3]) == [0, 1, 2]
        assert (grid["RMSE"] >= 0).all()

    def test_rmse(self):
        assert rmse([1.0, 2.0], [1.0, 4.0]) == pytest.approx(np.sqrt(2.0))


class TestFitPowerCurve:
    def test_best_candidate_refit(self, power_curve_df):
        model = fit_power_curve(power_curve_df, LOESS_DEGREES, LOESS_SPANS)
        assert model.rmse == pytest.approx(model.grid["RMSE"].min())
        pred = model.predict(power_curve_df["WindSpeed"])
        assert rmse(power_curve_df["Power"], pred) == pytest.approx(model.rmse)
        # Fits the sample closely
        assert model.rmse < 50.0

    def test_power_zero_outside_range(self, power_curve_df):
        model = fit_power_curve(power_curve_df, (1, 2), (0.1, 0.2))
        power = model.power(np.array([0.0, 2.0, 10.0, 26.0]))
        assert power[0] == 0.0
        assert power[1] == 0.0
        assert power[3] == 0.0
        assert power[2] > 0.0
