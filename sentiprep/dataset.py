# sentiprep/dataset.py
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import numpy as np
import torch
from torch.utils.data import DataLoader, Dataset

from .config import SAVE_LOG_EVERY, SEED
from .embeddings import known_tokens, tokenize

logger = logging.getLogger(__name__)

CLASSES = ("negative", "positive")


class IMDBReviews(Dataset):
    """Raw (text, label) pairs from an extracted aclImdb tree, pos/neg interleaved."""

    def __init__(self, corpus_dir: Path, train: bool = True):
        split_dir = Path(corpus_dir) / ("train" if train else "test")
        positive = sorted((split_dir / "pos").glob("*.txt"))
        negative = sorted((split_dir / "neg").glob("*.txt"))

        self.samples: List[Tuple[Path, int]] = []
        for i in range(max(len(positive), len(negative))):
            if i < len(positive):
                self.samples.append((positive[i], 1))
            if i < len(negative):
                self.samples.append((negative[i], 0))

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> Tuple[str, int]:
        path, label = self.samples[idx]
        return path.read_text(encoding="utf-8", errors="replace"), label


class ReviewCollator:
    """
    Turns a list of (text, label) pairs into one padded word-vector batch.

    Only words present in the vectors are kept, each review is cut to
    max_length, and the time axis is sized to the longest kept review.
    """

    def __init__(self, word_vectors, max_length: int):
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self.word_vectors = word_vectors
        self.max_length = max_length

    def __call__(self, samples: List[Tuple[str, int]]) -> Dict[str, torch.Tensor]:
        sequences = [known_tokens(tokenize(text), self.word_vectors)[: self.max_length] for text, _ in samples]
        steps = max([1] + [len(seq) for seq in sequences])
        dim = self.word_vectors.vector_size

        features = np.zeros((len(samples), steps, dim), dtype=np.float32)
        mask = np.zeros((len(samples), steps), dtype=np.float32)
        for i, seq in enumerate(sequences):
            for t, token in enumerate(seq):
                features[i, t] = self.word_vectors[token]
            mask[i, : len(seq)] = 1.0

        labels = torch.tensor([label for _, label in samples], dtype=torch.long)
        return {"features": torch.from_numpy(features), "mask": torch.from_numpy(mask), "labels": labels}


def get_review_loader(corpus_dir: Path, word_vectors, batch_size: int, max_length: int, train: bool) -> DataLoader:
    reviews = IMDBReviews(corpus_dir, train=train)
    logger.info(f"[Dataset] {'train' if train else 'test'} split: {len(reviews)} reviews from {corpus_dir}")
    return DataLoader(
        reviews,
        batch_size=batch_size,
        shuffle=False,
        num_workers=0,
        collate_fn=ReviewCollator(word_vectors, max_length),
    )


def save_datasets(batches: Iterable, out_dir: Path) -> int:
    """Write each batch to out_dir/dataset-<i>.bin, i counting from 0. Returns the count."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    count = 0
    for batch in batches:
        torch.save(batch, out_dir / f"dataset-{count}.bin")
        count += 1
        if count % SAVE_LOG_EVERY == 0:
            logger.info(f"[Save] {count} datasets saved so far...")
    return count


def _batch_index(path: Path) -> int:
    return int(path.stem.split("-", 1)[1])


class PresavedBatches(Dataset):
    """Batches written by save_datasets, served back in index order."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.files = sorted(self.directory.glob("dataset-*.bin"), key=_batch_index)
        if not self.files:
            raise FileNotFoundError(f"No presaved batches found in {self.directory}")

    def __len__(self) -> int:
        return len(self.files)

    def __getitem__(self, idx: int) -> Dict[str, torch.Tensor]:
        return torch.load(self.files[idx], map_location="cpu")


def get_dataloaders(train_dir: Path, test_dir: Path, shuffle_train: bool = True, seed: int = SEED):
    generator = torch.Generator().manual_seed(seed)
    loaders = {
        "train": DataLoader(PresavedBatches(train_dir), batch_size=None, shuffle=shuffle_train, generator=generator),
        "test": DataLoader(PresavedBatches(test_dir), batch_size=None, shuffle=False),
    }
    return loaders


def save_stats(counts: Dict[str, int], classes: Iterable[str], out_path: Path, **extra) -> None:
    classes = list(classes)
    stats = {
        "train_batches": counts.get("train", 0),
        "test_batches": counts.get("test", 0),
        "num_classes": len(classes),
        "classes": classes,
    }
    stats.update(extra)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2)
    logger.info(f"[Logs] Dataset stats saved: {out_path.resolve()}")
