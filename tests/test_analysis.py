"""End-to-end run of the distribution comparison on a synthetic mast archive."""
import pandas as pd
import pytest

from windaep.analysis import run_analysis
from windaep.config import ACTIVE_MAST


@pytest.fixture
def result(power_curve_csv, mast_nc, tmp_path):
    return run_analysis(
        power_curve_csv,
        mast_nc,
        height=125,
        year=1997,
        out_dir=tmp_path / "data_lake",
        viz_dir=tmp_path / "viz",
    )


class TestRunAnalysis:
    def test_outputs_written(self, result):
        for key in ("power_curve_plot", "distribution_table", "cdf_grid", "summary",
                    "weibull_plot", "pdf_plot", "cdf_plot", "final_plot"):
            assert result.outputs[key].exists(), key
        assert result.outputs["final_plot"].suffix == ".jpeg"

    def test_numbers_are_sane(self, result):
        assert result.aep_power_curve > 0
        assert 0.0 < result.capacity_factor < 1.0
        assert set(result.aep_models) == {"Weibull_MLE", "Weibull_MGE", "KDE"}
        assert all(v >= 0 for v in result.aep_models.values())
        for res in result.ks.values():
            assert 0.0 <= res.statistic <= 1.0
        assert result.table["Prob"].sum() == pytest.approx(1.0)

    def test_distributions_close_to_truth(self, result):
        # Synthetic wind is Weibull, so every approach lands near the time series AEP
        for aep in result.aep_models.values():
            assert aep == pytest.approx(result.aep_power_curve, rel=0.05)

    def test_summary_file(self, result):
        summary = pd.read_csv(result.outputs["summary"])
        assert summary["PowerCurve"].iloc[0] == pytest.approx(result.aep_power_curve)
        assert {"CapacityFactor", "RecoveryRate", "Ratio_KDE"} <= set(summary.columns)

    def test_table_round_trip(self, result):
        table = pd.read_parquet(result.outputs["distribution_table"])
        assert {"PDF_KDE", "PDF_Weibull_MLE", "PDF_Weibull_MGE", "CDF", "CDF_ECDF"} <= set(table.columns)


def test_unmeasured_height(power_curve_csv, mast_nc, tmp_path):
    assert 100 not in ACTIVE_MAST.heights
    with pytest.raises(ValueError, match="not measured"):
        run_analysis(power_curve_csv, mast_nc, height=100, out_dir=tmp_path, viz_dir=tmp_path)
