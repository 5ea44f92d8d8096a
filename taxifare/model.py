"""
Model Training Module
=====================

Fare regression model: the feature transformer and a
HistGradientBoostingRegressor fitted together as one scikit-learn Pipeline.

Features:
    - Joint fit of encoders, scaling statistics and tree ensemble
    - Hyperparameter configuration via config file
    - Model persistence (save/load) tagged with the input schema
    - Training progress logging
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

import numpy as np
import pandas as pd
import joblib
from sklearn.ensemble import HistGradientBoostingRegressor
from sklearn.pipeline import Pipeline

from .config import ModelConfig
from .preprocessing import build_feature_transformer, get_feature_names
from .schema import INPUT_COLUMNS

logger = logging.getLogger(__name__)


class FarePredictionModel:
    """
    Taxi fare prediction model using HistGradientBoostingRegressor.

    Wraps the feature transformer and the regressor in a single Pipeline so
    that the encoding tables and normalization statistics learned on the
    training split are reused unchanged for every later prediction.
    """

    def __init__(
        self,
        max_iter: int = 100,
        max_leaf_nodes: int = 20,
        max_depth: Optional[int] = None,
        learning_rate: float = 0.2,
        min_samples_leaf: int = 10,
        l2_regularization: float = 0.0,
        random_state: int = 0,
        early_stopping: Union[bool, str] = "auto",
        validation_fraction: float = 0.1,
        n_iter_no_change: int = 10
    ):
        """
        Initialize the model with hyperparameters.

        Args:
            max_iter: Maximum number of boosting iterations
            max_leaf_nodes: Maximum number of leaves per tree
            max_depth: Maximum depth of each tree (None for unlimited)
            learning_rate: Learning rate (shrinkage)
            min_samples_leaf: Minimum samples required in a leaf
            l2_regularization: L2 regularization strength
            random_state: Random seed for reproducibility
            early_stopping: Whether to use early stopping ('auto' enables
                it for large training sets)
            validation_fraction: Fraction of data for early stopping validation
            n_iter_no_change: Number of iterations without improvement before stopping
        """
        self.max_iter = max_iter
        self.max_leaf_nodes = max_leaf_nodes
        self.max_depth = max_depth
        self.learning_rate = learning_rate
        self.min_samples_leaf = min_samples_leaf
        self.l2_regularization = l2_regularization
        self.random_state = random_state
        self.early_stopping = early_stopping
        self.validation_fraction = validation_fraction
        self.n_iter_no_change = n_iter_no_change

        self.pipeline: Optional[Pipeline] = None
        self.input_schema: Dict[str, str] = {}
        self.feature_names_: Optional[List[str]] = None
        self.training_info: Dict[str, Any] = {}
        self._is_fitted = False

    @classmethod
    def from_config(cls, model_config: ModelConfig, random_state: int = 0) -> 'FarePredictionModel':
        return cls(
            max_iter=model_config.max_iter,
            max_leaf_nodes=model_config.max_leaf_nodes,
            max_depth=model_config.max_depth,
            learning_rate=model_config.learning_rate,
            min_samples_leaf=model_config.min_samples_leaf,
            l2_regularization=model_config.l2_regularization,
            random_state=random_state,
            early_stopping=model_config.early_stopping,
            validation_fraction=model_config.validation_fraction,
            n_iter_no_change=model_config.n_iter_no_change
        )

    def get_hyperparameters(self) -> Dict[str, Any]:
        return {
            'max_iter': self.max_iter,
            'max_leaf_nodes': self.max_leaf_nodes,
            'max_depth': self.max_depth,
            'learning_rate': self.learning_rate,
            'min_samples_leaf': self.min_samples_leaf,
            'l2_regularization': self.l2_regularization,
            'random_state': self.random_state,
            'early_stopping': self.early_stopping,
            'validation_fraction': self.validation_fraction,
            'n_iter_no_change': self.n_iter_no_change
        }

    def _create_regressor(self) -> HistGradientBoostingRegressor:
        """Create the base HistGradientBoostingRegressor."""
        return HistGradientBoostingRegressor(
            loss='squared_error',
            max_iter=self.max_iter,
            max_leaf_nodes=self.max_leaf_nodes,
            max_depth=self.max_depth,
            learning_rate=self.learning_rate,
            min_samples_leaf=self.min_samples_leaf,
            l2_regularization=self.l2_regularization,
            random_state=self.random_state,
            early_stopping=self.early_stopping,
            validation_fraction=self.validation_fraction,
            n_iter_no_change=self.n_iter_no_change,
            verbose=0
        )

    def fit(self, X: pd.DataFrame, y: pd.Series) -> 'FarePredictionModel':
        """
        Fit the feature transformer and the regressor on training trips.

        Args:
            X: Trip inputs (all fields except the fare)
            y: Fare labels

        Returns:
            Self for method chaining
        """
        start_time = datetime.now()

        logger.info("=" * 60)
        logger.info("STARTING MODEL TRAINING")
        logger.info("=" * 60)
        logger.info(f"Training data shape: X={X.shape}, y={y.shape}")
        logger.info("Hyperparameters:")
        for name, value in self.get_hyperparameters().items():
            logger.info(f"  - {name}: {value}")

        X = X[INPUT_COLUMNS]
        self.input_schema = {name: str(dtype) for name, dtype in X.dtypes.items()}

        self.pipeline = Pipeline(steps=[
            ("features", build_feature_transformer()),
            ("regressor", self._create_regressor())
        ])
        self.pipeline.fit(X, y)

        self.feature_names_ = get_feature_names(self.pipeline.named_steps["features"])

        end_time = datetime.now()
        training_duration = (end_time - start_time).total_seconds()

        regressor = self.pipeline.named_steps["regressor"]
        self.training_info = {
            'training_duration_seconds': training_duration,
            'n_samples': int(X.shape[0]),
            'n_features': len(self.feature_names_),
            'actual_iterations': int(regressor.n_iter_),
            'trained_at': end_time.isoformat()
        }

        self._is_fitted = True

        logger.info(f"Feature vector: {self.feature_names_}")
        logger.info(f"Boosting iterations: {regressor.n_iter_}")
        logger.info("=" * 60)
        logger.info(f"MODEL TRAINING COMPLETE in {training_duration:.2f} seconds")
        logger.info("=" * 60)

        return self

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """
        Predict fares using the trained pipeline.

        Args:
            X: Trip inputs; extra columns such as the fare are ignored

        Returns:
            Predicted fares of shape (n_samples,)
        """
        if not self._is_fitted:
            raise ValueError("Model must be trained before prediction. Call fit() first.")

        missing = [name for name in INPUT_COLUMNS if name not in X.columns]
        if missing:
            raise ValueError(f"Input is missing trip fields: {missing}")

        return self.pipeline.predict(X[INPUT_COLUMNS])

    def save(self, filepath: Union[str, Path]) -> None:
        """
        Save the trained model to disk.

        Args:
            filepath: Path to save the model
        """
        if not self._is_fitted:
            raise ValueError("Cannot save untrained model.")

        state = {
            'pipeline': self.pipeline,
            'hyperparameters': self.get_hyperparameters(),
            'input_schema': self.input_schema,
            'feature_names': self.feature_names_,
            'training_info': self.training_info,
            '_is_fitted': self._is_fitted
        }

        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(state, filepath)
        logger.info(f"Model saved to {filepath}")

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'FarePredictionModel':
        """
        Load a trained model from disk.

        Args:
            filepath: Path to the saved model

        Returns:
            Loaded FarePredictionModel instance

        Raises:
            FileNotFoundError: If the model file doesn't exist
        """
        if not Path(filepath).exists():
            raise FileNotFoundError(f"Model file not found: {filepath}")

        state = joblib.load(filepath)

        model = cls(**state['hyperparameters'])
        model.pipeline = state['pipeline']
        model.input_schema = state['input_schema']
        model.feature_names_ = state['feature_names']
        model.training_info = state['training_info']
        model._is_fitted = state['_is_fitted']

        logger.info(f"Model loaded from {filepath}")
        return model


def train_model(
    X_train: pd.DataFrame,
    y_train: pd.Series,
    model_config: ModelConfig,
    random_state: int = 0,
    save_path: Optional[Union[str, Path]] = None
) -> FarePredictionModel:
    """
    Train a model using configuration parameters.

    Args:
        X_train: Training trip inputs
        y_train: Training fares
        model_config: Model hyperparameters
        random_state: Random seed
        save_path: Path to save the trained model (optional)

    Returns:
        Trained FarePredictionModel
    """
    model = FarePredictionModel.from_config(model_config, random_state=random_state)
    model.fit(X_train, y_train)

    if save_path:
        model.save(save_path)

    return model


def print_model_summary(model: FarePredictionModel) -> None:
    """
    Print a summary of the trained model.

    Args:
        model: Trained model instance
    """
    print("Model Type: Pipeline(ColumnTransformer, HistGradientBoostingRegressor)")
    print(f"Number of input features: {len(model.feature_names_ or [])}")
    print("Hyperparameters:")
    print(f"  - max_iter: {model.max_iter}")
    print(f"  - max_leaf_nodes: {model.max_leaf_nodes}")
    print(f"  - learning_rate: {model.learning_rate}")
    print(f"  - min_samples_leaf: {model.min_samples_leaf}")

    if model.training_info:
        print("Training Info:")
        print(f"  - Duration: {model.training_info.get('training_duration_seconds', 0.0):.2f}s")
        print(f"  - Samples: {model.training_info.get('n_samples', 'N/A')}")
        print(f"  - Actual iterations: {model.training_info.get('actual_iterations', 'N/A')}")
