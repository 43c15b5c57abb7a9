# sentiprep/evaluate.py
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
import torch
import torch.nn as nn
from sklearn.metrics import confusion_matrix

logger = logging.getLogger(__name__)


def evaluate_model(model, loader, device, criterion: nn.Module = None) -> Dict[str, float]:
    model.eval()
    loss_total, correct, total = 0.0, 0, 0
    criterion = criterion or nn.CrossEntropyLoss()
    with torch.no_grad():
        for batch in loader:
            features = batch["features"].to(device)
            mask = batch["mask"].to(device)
            labels = batch["labels"].to(device)
            outputs = model(features, mask)
            loss = criterion(outputs, labels)
            loss_total += loss.item() * labels.size(0)
            _, preds = torch.max(outputs, 1)
            correct += (preds == labels).sum().item()
            total += labels.size(0)
    return {"loss": loss_total / total, "acc": 100.0 * correct / total}


def collect_predictions(model, loader, device) -> Tuple[List[int], List[int]]:
    model.eval()
    y_true, y_pred = [], []
    with torch.no_grad():
        for batch in loader:
            outputs = model(batch["features"].to(device), batch["mask"].to(device))
            _, preds = torch.max(outputs, 1)
            y_true.extend(batch["labels"].cpu().tolist())
            y_pred.extend(preds.cpu().tolist())
    return y_true, y_pred


def confusion_matrix_plot(y_true: List[int], y_pred: List[int], classes: Sequence[str], out_path: Path) -> None:
    cm = confusion_matrix(y_true, y_pred, labels=list(range(len(classes))))
    row_sums = cm.sum(axis=1, keepdims=True)
    cm_norm = cm.astype("float") / row_sums.clip(min=1)
    plt.figure(figsize=(5, 4))
    sns.heatmap(cm_norm, annot=True, fmt=".2f", cmap="Blues", xticklabels=classes, yticklabels=classes)
    plt.xlabel("Predicted")
    plt.ylabel("True")
    plt.title("Confusion Matrix (Normalized)")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(out_path)
    logger.info(f"[Eval] Confusion matrix saved: {out_path.resolve()}")
    plt.close()
