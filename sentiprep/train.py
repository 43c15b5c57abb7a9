# sentiprep/train.py
import json
import logging
from pathlib import Path
from typing import Any, Dict

import torch
import torch.nn as nn
import torch.optim as optim
from torch.optim.lr_scheduler import ReduceLROnPlateau

from .config import HIDDEN_SIZE, LOGS_DIR, MODEL_FILENAME, MODELS_DIR
from .evaluate import evaluate_model
from .model import build_model

logger = logging.getLogger(__name__)


def _to_device(batch, device):
    return batch["features"].to(device), batch["mask"].to(device), batch["labels"].to(device)


def train_one_epoch(model, loader, device, criterion, optimizer) -> Dict[str, float]:
    model.train()
    running_loss, correct, total = 0.0, 0, 0
    for batch in loader:
        features, mask, labels = _to_device(batch, device)
        optimizer.zero_grad(set_to_none=True)
        outputs = model(features, mask)
        loss = criterion(outputs, labels)
        loss.backward()
        optimizer.step()
        running_loss += loss.item() * labels.size(0)
        _, preds = torch.max(outputs, 1)
        correct += (preds == labels).sum().item()
        total += labels.size(0)
    return {"loss": running_loss / total, "acc": 100.0 * correct / total}


def save_checkpoint(model, optimizer, epoch: int, best_acc: float, out_path: Path):
    out_path.parent.mkdir(parents=True, exist_ok=True)
    torch.save({
        "epoch": epoch,
        "input_size": model.input_size,
        "hidden_size": model.lstm.hidden_size,
        "num_classes": model.fc.out_features,
        "model_state": model.state_dict(),
        "optimizer_state": optimizer.state_dict(),
        "best_acc": best_acc,
    }, out_path)
    logger.info(f"[Checkpoint] Saved: {out_path.resolve()}")


def load_checkpoint(path: Path, device):
    ckpt = torch.load(path, map_location=device)
    model = build_model(
        input_size=ckpt["input_size"],
        num_classes=ckpt.get("num_classes", 2),
        hidden_size=ckpt.get("hidden_size", HIDDEN_SIZE),
    )
    model.load_state_dict(ckpt["model_state"])
    return model.to(device)


def train_model(model, loaders, device, cfg: Dict[str, Any]):
    epochs = int(cfg.get("epochs", 2))
    lr = float(cfg.get("lr", 1e-3))
    weight_decay = float(cfg.get("weight_decay", 1e-5))
    best_path = Path(cfg.get("checkpoint_path", MODELS_DIR / MODEL_FILENAME))
    logs_dir = Path(cfg.get("logs_dir", LOGS_DIR))

    criterion = nn.CrossEntropyLoss()
    optimizer = optim.Adam(model.parameters(), lr=lr, weight_decay=weight_decay)
    scheduler = ReduceLROnPlateau(optimizer, mode="max", factor=0.5, patience=2)

    history = {"train_loss": [], "test_loss": [], "train_acc": [], "test_acc": [], "lr": []}
    best_acc = 0.0

    for epoch in range(1, epochs + 1):
        train_metrics = train_one_epoch(model, loaders["train"], device, criterion, optimizer)
        test_metrics = evaluate_model(model, loaders["test"], device, criterion)
        scheduler.step(test_metrics["acc"])

        history["train_loss"].append(train_metrics["loss"])
        history["train_acc"].append(train_metrics["acc"])
        history["test_loss"].append(test_metrics["loss"])
        history["test_acc"].append(test_metrics["acc"])
        history["lr"].append(optimizer.param_groups[0]["lr"])

        logger.info(f"[Epoch {epoch}/{epochs}] "
                    f"Train Loss {train_metrics['loss']:.4f} | Train Acc {train_metrics['acc']:.2f}% || "
                    f"Test Loss {test_metrics['loss']:.4f} | Test Acc {test_metrics['acc']:.2f}% | "
                    f"LR {optimizer.param_groups[0]['lr']:.5f}")

        if test_metrics["acc"] > best_acc or epoch == 1:
            best_acc = max(best_acc, test_metrics["acc"])
            save_checkpoint(model, optimizer, epoch, best_acc, best_path)

        # stop once accuracy has not improved for `patience` epochs
        patience = 5
        if len(history["test_acc"]) > patience:
            recent = history["test_acc"][-patience:]
            if max(recent) < best_acc - 0.01:
                logger.info("[EarlyStop] Test accuracy plateaued. Stopping.")
                break

    hist_path = logs_dir / "history_last.json"
    hist_path.parent.mkdir(parents=True, exist_ok=True)
    with open(hist_path, "w", encoding="utf-8") as f:
        json.dump(history, f, indent=2)
    logger.info(f"[Logs] Training history saved: {hist_path.resolve()}")

    return model, history
