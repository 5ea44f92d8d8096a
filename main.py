#!/usr/bin/env python3
"""
Taxi Fare Predictor - Main Pipeline
===================================

Orchestrates the complete fare prediction pipeline.

Phases:
    1. Preparation - Clean blank cells of the raw CSV and load it
    2. Reports - Missing values, distinct values and frequencies
    3. Training - Filter, split and fit the boosted-tree model
    4. Evaluation - Regression metrics on the held-out split
    5. Prediction - Reload the saved model and predict a sample trip

Usage:
    # Run complete pipeline with the default configuration
    python main.py

    # Run a single phase
    python main.py --phase report

    # Use another input file or config
    python main.py --data data/taxi-fare-test.csv --config config/config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from taxifare.config import DEFAULT_CONFIG_PATH, PipelineConfig, load_config
from taxifare.data_loader import load_data, prepare_data, print_data_summary
from taxifare.evaluation import evaluate_model, print_evaluation_report
from taxifare.model import print_model_summary, train_model
from taxifare.prediction import print_prediction_results, run_single_prediction
from taxifare.preprocessing import preprocess_pipeline, print_preprocessing_summary
from taxifare.reports import generate_dataset_report, print_separator


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure logging for the pipeline."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(log_dir / f'pipeline_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
        )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def run_preparation(config: PipelineConfig) -> pd.DataFrame:
    """
    Execute Phase 1: clean the raw CSV and load the cleaned copy.

    Args:
        config: Pipeline configuration

    Returns:
        Loaded trip records
    """
    prepare_data(config.data.raw_path, config.data.prepared_path)
    df = load_data(config.data.prepared_path)
    print_data_summary(df)
    return df


def run_reports(df: pd.DataFrame, config: PipelineConfig) -> Dict[str, Any]:
    """
    Execute Phase 2: dataset reports.

    Args:
        df: Loaded trip records
        config: Pipeline configuration

    Returns:
        Report dictionary
    """
    print_separator(top_margin=False)

    figures_dir = config.figures_path if config.output.save_figures else None
    return generate_dataset_report(df, figures_dir=figures_dir)


def run_training(
    df: pd.DataFrame,
    config: PipelineConfig
) -> Dict[str, Any]:
    """
    Execute Phases 3 and 4: filter, split, train, evaluate and save.

    Args:
        df: Loaded trip records
        config: Pipeline configuration

    Returns:
        Dictionary with the preprocessing result, model and evaluation
    """
    prep_result = preprocess_pipeline(df, config)
    print_preprocessing_summary(prep_result)

    print_separator()

    print("Training the model...")
    model = train_model(
        prep_result['X_train'],
        prep_result['y_train'],
        config.model,
        random_state=config.random_state
    )
    print_model_summary(model)
    print()

    print("Evaluating Model's accuracy with Test data...")
    y_pred = model.predict(prep_result['X_test'])
    print()

    evaluation = evaluate_model(
        prep_result['y_test'].to_numpy(),
        y_pred,
        output_dir=config.output.reports_path,
        save_figures=config.output.save_figures
    )
    print_evaluation_report(evaluation['metrics'])

    print_separator()

    model.save(config.data.model_path)
    print(f"The model is saved to {Path(config.data.model_path).resolve()}")

    return {
        'preprocessing': prep_result,
        'model': model,
        'evaluation': evaluation
    }


def run_prediction(config: PipelineConfig) -> Dict[str, Any]:
    """
    Execute Phase 5: reload the saved model and predict the sample trip.

    Args:
        config: Pipeline configuration

    Returns:
        Prediction result dictionary
    """
    result = run_single_prediction(config.data.model_path)
    print_prediction_results(result)
    return result


def run_full_pipeline(config: PipelineConfig) -> Dict[str, Any]:
    """
    Execute the complete pipeline.

    Args:
        config: Pipeline configuration

    Returns:
        Dictionary containing all phase results
    """
    logging.getLogger(__name__).info(
        f"Pipeline started at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
    )

    results = {}

    df = run_preparation(config)
    results['data_shape'] = df.shape

    results['reports'] = run_reports(df, config)

    print_separator()

    results.update(run_training(df, config))

    print_separator()

    results['prediction'] = run_prediction(config)

    print_separator(bottom_margin=False)

    return results


def run_single_phase(phase: str, config: PipelineConfig) -> Dict[str, Any]:
    """
    Execute a single phase of the pipeline.

    Args:
        phase: Phase to run ('report', 'train', 'predict')
        config: Pipeline configuration

    Returns:
        Phase result dictionary
    """
    if phase == 'report':
        df = run_preparation(config)
        return run_reports(df, config)

    elif phase == 'train':
        df = run_preparation(config)
        return run_training(df, config)

    elif phase == 'predict':
        return run_prediction(config)

    else:
        raise ValueError(f"Unknown phase: {phase}. Choose from: report, train, predict")


def main(argv: Optional[list] = None) -> int:
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="Taxi fare prediction pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --phase report
  python main.py --data data/taxi-fare-test.csv
        """
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--data', '-d',
        type=str,
        default=None,
        help='Path to the input CSV file (overrides the configured path)'
    )

    parser.add_argument(
        '--phase', '-p',
        type=str,
        choices=['report', 'train', 'predict', 'all'],
        default='all',
        help='Phase to run (default: all)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    # Check if config exists
    if not Path(args.config).exists():
        print(f"Error: Config file not found: {args.config}")
        return 1

    config = load_config(args.config)
    if args.data:
        config = config.with_raw_path(args.data)

    setup_logging('DEBUG' if args.verbose else config.log_level, config.output.logs_path)

    # Check if data file exists
    if args.phase != 'predict' and not Path(config.data.raw_path).exists():
        print(f"Error: Data file not found: {config.data.raw_path}")
        print("\nPlace the taxi fare CSV file in the configured location.")
        print("Expected format: CSV with header and 7 columns "
              "(vendor_id, rate_code, passenger_count, trip_time_in_secs, "
              "trip_distance, payment_type, fare_amount)")
        return 1

    try:
        if args.phase == 'all':
            run_full_pipeline(config)
        else:
            run_single_phase(args.phase, config)

        return 0

    except Exception as e:
        logging.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
