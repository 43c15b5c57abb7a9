# sentiprep/predict.py
from typing import Dict

import torch

from .config import DEFAULT_MAX_LENGTH
from .dataset import CLASSES, ReviewCollator


def predict_review(model, text: str, word_vectors, device, max_length: int = DEFAULT_MAX_LENGTH) -> Dict:
    batch = ReviewCollator(word_vectors, max_length)([(text, 0)])
    features = batch["features"].to(device)
    mask = batch["mask"].to(device)

    model.eval()
    with torch.no_grad():
        logits = model(features, mask)
        probs = torch.softmax(logits, dim=1)[0].cpu().tolist()

    pred_idx = int(torch.argmax(torch.tensor(probs)).item())
    return {"pred_class": CLASSES[pred_idx], "pred_idx": pred_idx, "probs": probs}
