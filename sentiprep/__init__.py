# sentiprep/__init__.py
"""
SentiPrep package initializer.

This module:
- Sets up a package-wide logger with sane defaults.
- Provides utility helpers (device selection, version, simple config loader).
- Exposes top-level imports for the preprocessing pipeline and the training companion.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# ---------------------------
# Version and package metadata
# ---------------------------
__title__ = "sentiprep"
__version__ = "0.1.0"
__license__ = "MIT"

# ---------------------------
# Logging setup (package-wide)
# ---------------------------
def _setup_logger() -> logging.Logger:
    logger = logging.getLogger(__title__)
    if logger.handlers:
        return logger  # already configured

    logger.setLevel(logging.INFO)

    # Console handler
    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(logging.INFO)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # File handler, only when the logs folder is writable
    from .config import LOGS_DIR
    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(LOGS_DIR / "package.log", mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning(f"[Init] File logging disabled: {e}")
    else:
        fh.setLevel(logging.INFO)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    logger.propagate = False
    return logger

logger = _setup_logger()
logger.debug(f"Initialized {__title__} v{__version__}")

# ---------------------------
# Device utility
# ---------------------------
def get_device(prefer_mps: bool = False):
    """
    Returns a torch device. Prefers CUDA; can optionally try Apple MPS.
    """
    import torch
    if torch.cuda.is_available():
        logger.info(f"[Device] Using CUDA: {torch.cuda.get_device_name(0)}")
        return torch.device("cuda")
    if prefer_mps and hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        logger.info("[Device] Using Apple MPS")
        return torch.device("mps")
    logger.info("[Device] Using CPU")
    return torch.device("cpu")

# ---------------------------
# Simple config loader (JSON/YAML)
# ---------------------------
def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Load configuration from JSON or YAML file, then apply overrides.
    """
    cfg: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {p}")
        ext = p.suffix.lower()
        if ext in (".json",):
            cfg = json.loads(p.read_text(encoding="utf-8"))
        elif ext in (".yml", ".yaml"):
            try:
                import yaml  # type: ignore
            except ImportError:
                raise RuntimeError("PyYAML not installed. Run: pip install pyyaml")
            cfg = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        else:
            raise ValueError(f"Unsupported config format: {ext}")

    overrides = overrides or {}
    cfg.update(overrides)
    return cfg

# ---------------------------
# Public API re-exports
# ---------------------------
from . import config
from .extract import ExtractionStats, extract_tar_gz
from .download import download_data, download_file, check_download_w2v_model
from .dataset import CLASSES, IMDBReviews, ReviewCollator, PresavedBatches, save_datasets, get_dataloaders
from .builder import build_datasets
from .model import SentimentLSTM, build_model
from .train import train_model, load_checkpoint
from .evaluate import evaluate_model, collect_predictions, confusion_matrix_plot
from .predict import predict_review

__all__ = [
    "__title__", "__version__", "logger",
    "get_device", "load_config",
    "config", "ExtractionStats", "extract_tar_gz",
    "download_data", "download_file", "check_download_w2v_model",
    "CLASSES", "IMDBReviews", "ReviewCollator", "PresavedBatches",
    "save_datasets", "get_dataloaders", "build_datasets",
    "SentimentLSTM", "build_model", "train_model", "load_checkpoint",
    "evaluate_model", "collect_predictions", "confusion_matrix_plot",
    "predict_review",
]
