"""
Test Suite for Evaluation Module
================================
"""

import json

import numpy as np
import pytest

from taxifare.evaluation import (
    calculate_metrics,
    evaluate_model,
    format_metric,
    print_evaluation_report,
)


class TestCalculateMetrics:
    """Tests for regression metric computation."""

    def test_known_values(self):
        metrics = calculate_metrics(np.array([1.0, 2.0, 3.0, 4.0]), np.array([1.0, 2.0, 3.0, 5.0]))

        assert metrics['mse'] == pytest.approx(0.25)
        assert metrics['loss'] == pytest.approx(0.25)
        assert metrics['mae'] == pytest.approx(0.25)
        assert metrics['rmse'] == pytest.approx(0.5)
        assert metrics['r2'] == pytest.approx(0.8)
        assert metrics['n_samples'] == 4

    def test_perfect_prediction(self):
        y = np.array([5.0, 7.5, 12.0])
        metrics = calculate_metrics(y, y)

        assert metrics['rmse'] == 0.0
        assert metrics['r2'] == pytest.approx(1.0)

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="Length mismatch"):
            calculate_metrics(np.ones(3), np.ones(2))

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            calculate_metrics(np.array([]), np.array([]))


class TestFormatMetric:

    def test_rounding(self):
        assert format_metric(3.14159) == "3.14"
        assert format_metric(2.5) == "2.5"
        assert format_metric(2.0) == "2"
        assert format_metric(-0.001) == "0"


class TestEvaluateModel:
    """Tests for the evaluation phase."""

    @pytest.fixture
    def predictions(self):
        rng = np.random.default_rng(0)
        y_true = rng.uniform(3, 40, 50)
        return y_true, y_true + rng.normal(0, 1, 50)

    def test_metrics_file(self, predictions, tmp_path):
        y_true, y_pred = predictions
        result = evaluate_model(y_true, y_pred, output_dir=tmp_path, save_figures=False)

        with open(result['metrics_file']) as f:
            saved = json.load(f)

        assert saved['rmse'] == pytest.approx(result['metrics']['rmse'])
        assert result['figures'] == []

    def test_figures(self, predictions, tmp_path):
        y_true, y_pred = predictions
        result = evaluate_model(y_true, y_pred, output_dir=tmp_path, save_figures=True)

        assert result['figures'] == ["eval_actual_vs_predicted.png", "eval_residuals.png"]
        for name in result['figures']:
            assert (tmp_path / "figures" / name).exists()

    def test_print_report(self, capsys):
        metrics = calculate_metrics(np.array([1.0, 2.0, 3.0, 4.0]), np.array([1.0, 2.0, 3.0, 5.0]))
        print_evaluation_report(metrics, "Fast Tree")
        out = capsys.readouterr().out

        assert "Metrics for Fast Tree regression model" in out
        assert "- LossFn: 0.25" in out
        assert "- R2 Score: 0.8" in out
        assert "- RMS loss: 0.5" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
