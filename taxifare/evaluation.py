"""
Model Evaluation Module
=======================

Regression metrics and diagnostic plots for the fare model.

Features:
    - Loss, R², MAE, MSE and RMSE on the held-out split
    - Actual vs Predicted plot
    - Residual analysis
    - Metrics JSON export
"""

import logging
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.metrics import mean_squared_error, mean_absolute_error, r2_score

logger = logging.getLogger(__name__)


def calculate_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[str, Any]:
    """
    Calculate regression metrics over (actual, predicted) pairs.

    The loss is the squared error the regressor is trained on, so it
    equals the MSE.

    Args:
        y_true: Actual fares
        y_pred: Predicted fares

    Returns:
        Dictionary with 'loss', 'r2', 'mae', 'mse', 'rmse' and 'n_samples'
    """
    y_true = np.asarray(y_true, dtype=float).ravel()
    y_pred = np.asarray(y_pred, dtype=float).ravel()

    if len(y_true) != len(y_pred):
        raise ValueError(
            f"Length mismatch: {len(y_true)} actual vs {len(y_pred)} predicted values"
        )
    if len(y_true) == 0:
        raise ValueError("Cannot evaluate on an empty test set")

    mse = mean_squared_error(y_true, y_pred)

    return {
        'loss': float(mse),
        'r2': float(r2_score(y_true, y_pred)) if len(y_true) > 1 else float('nan'),
        'mae': float(mean_absolute_error(y_true, y_pred)),
        'mse': float(mse),
        'rmse': float(np.sqrt(mse)),
        'n_samples': int(len(y_true))
    }


def format_metric(value: float, decimals: int = 2) -> str:
    """Round to at most `decimals` places, trimming trailing zeros."""
    if not np.isfinite(value):
        return str(value)
    text = f"{value:.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return "0" if text in ("-0", "") else text


def plot_actual_vs_predicted(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    figsize: Tuple[int, int] = (7, 6),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Scatter plot of actual against predicted fares.

    Args:
        y_true: Actual fares
        y_pred: Predicted fares
        figsize: Figure size
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(y_true, y_pred, alpha=0.5, s=20)

    # Perfect prediction line
    min_val = min(y_true.min(), y_pred.min())
    max_val = max(y_true.max(), y_pred.max())
    ax.plot([min_val, max_val], [min_val, max_val], 'r--', linewidth=2, label='Perfect')

    rmse = np.sqrt(mean_squared_error(y_true, y_pred))
    ax.set_xlabel('Actual fare')
    ax.set_ylabel('Predicted fare')
    ax.set_title(f'Actual vs Predicted (RMSE={rmse:.4f})', fontsize=12, fontweight='bold')
    ax.legend(loc='upper left', fontsize=8)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Actual vs Predicted plot saved to {save_path}")

    return fig


def plot_residuals(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    figsize: Tuple[int, int] = (7, 5),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Histogram of residuals for model diagnostics.

    Args:
        y_true: Actual fares
        y_pred: Predicted fares
        figsize: Figure size
        save_path: Path to save the figure

    Returns:
        Matplotlib Figure object
    """
    residuals = np.asarray(y_true, dtype=float) - np.asarray(y_pred, dtype=float)

    fig, ax = plt.subplots(figsize=figsize)
    sns.histplot(residuals, kde=len(residuals) > 1, ax=ax, bins=50, alpha=0.7)

    ax.axvline(0, color='red', linestyle='--', linewidth=2, label='Zero')
    ax.axvline(np.mean(residuals), color='green', linestyle='--',
               linewidth=2, label=f'Mean: {np.mean(residuals):.4f}')

    ax.set_xlabel('Residual (Actual - Predicted)')
    ax.set_ylabel('Frequency')
    ax.set_title(f'Residuals (Std: {np.std(residuals):.4f})', fontsize=12, fontweight='bold')
    ax.legend(fontsize=8)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Residuals plot saved to {save_path}")

    return fig


def evaluate_model(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    output_dir: Union[str, Path] = "reports/",
    save_figures: bool = True
) -> Dict[str, Any]:
    """
    Compute metrics on the test split and write the evaluation artifacts.

    Args:
        y_true: Actual fares
        y_pred: Predicted fares
        output_dir: Directory for output files
        save_figures: Whether to render diagnostic plots

    Returns:
        Dictionary containing metrics and file paths
    """
    output_dir = Path(output_dir)
    metrics_dir = output_dir / "metrics"
    figures_dir = output_dir / "figures"
    metrics_dir.mkdir(parents=True, exist_ok=True)

    logger.info("=" * 60)
    logger.info("STARTING MODEL EVALUATION")
    logger.info("=" * 60)

    metrics = calculate_metrics(y_true, y_pred)

    metrics_file = metrics_dir / "evaluation_metrics.json"
    with open(metrics_file, 'w') as f:
        json.dump(metrics, f, indent=2)
    logger.info(f"Metrics saved to {metrics_file}")

    figures = []
    if save_figures:
        figures_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Generating Actual vs Predicted plot...")
        plot_actual_vs_predicted(
            y_true, y_pred,
            save_path=str(figures_dir / "eval_actual_vs_predicted.png")
        )
        figures.append("eval_actual_vs_predicted.png")

        logger.info("Generating residual analysis...")
        plot_residuals(
            y_true, y_pred,
            save_path=str(figures_dir / "eval_residuals.png")
        )
        figures.append("eval_residuals.png")

        plt.close('all')

    if metrics['r2'] < 0.5:
        logger.warning(f"Low R² on test data: {metrics['r2']:.4f}")

    logger.info("=" * 60)
    logger.info("EVALUATION COMPLETE")
    logger.info(f"  RMSE: {metrics['rmse']:.6f}")
    logger.info(f"  MAE: {metrics['mae']:.6f}")
    logger.info(f"  R²: {metrics['r2']:.6f}")
    logger.info("=" * 60)

    return {
        'metrics': metrics,
        'figures': figures,
        'metrics_file': str(metrics_file)
    }


def print_evaluation_report(metrics: Dict[str, Any], model_name: str = "Gradient Boosted Trees") -> None:
    """
    Print the regression metrics block.

    Args:
        metrics: Metrics dictionary from calculate_metrics
        model_name: Name shown in the heading
    """
    print("-" * 20 + f" Metrics for {model_name} regression model " + "-" * 20)
    print(f"- LossFn: {format_metric(metrics['loss'])}")
    print(f"- R2 Score: {format_metric(metrics['r2'])}")
    print(f"- Absolute loss: {format_metric(metrics['mae'])}")
    print(f"- Squared loss: {format_metric(metrics['mse'])}")
    print(f"- RMS loss: {format_metric(metrics['rmse'])}")
