# tests/test_dataset.py
import numpy as np
import pytest
import torch

from sentiprep.dataset import (
    CLASSES,
    IMDBReviews,
    PresavedBatches,
    ReviewCollator,
    get_dataloaders,
    get_review_loader,
    save_datasets,
    save_stats,
)
from sentiprep.embeddings import known_tokens, load_word_vectors, tokenize


# -----------------------------
# Tokenizer
# -----------------------------

def test_tokenize_strips_markup_punctuation_and_digits():
    assert tokenize("Great movie!<br /><br />It's 10/10.") == ["great", "movie", "its"]


def test_known_tokens_filters_vocab(word_vectors):
    assert known_tokens(["good", "zzz", "plot"], word_vectors) == ["good", "plot"]


def test_load_word_vectors_text_format(tmp_path, word_vectors):
    path = tmp_path / "vectors.txt"
    word_vectors.save_word2vec_format(str(path), binary=False)

    loaded = load_word_vectors(path)

    assert loaded.vector_size == word_vectors.vector_size
    assert "movie" in loaded
    np.testing.assert_allclose(loaded["movie"], word_vectors["movie"], rtol=1e-5)


# -----------------------------
# Raw review dataset
# -----------------------------

def test_reviews_interleave_positive_and_negative(corpus_dir):
    reviews = IMDBReviews(corpus_dir, train=True)

    assert len(reviews) == 5
    assert [label for _, label in reviews.samples] == [1, 0, 1, 0, 1]
    text, label = reviews[0]
    assert text == "Great movie!"
    assert CLASSES[label] == "positive"


def test_test_split(corpus_dir):
    reviews = IMDBReviews(corpus_dir, train=False)
    assert [reviews[i] for i in range(len(reviews))] == [("good", 1), ("bad", 0)]


# -----------------------------
# Batch construction
# -----------------------------

def test_collator_shapes_and_mask(corpus_dir, word_vectors):
    reviews = IMDBReviews(corpus_dir, train=True)
    batch = ReviewCollator(word_vectors, max_length=3)([reviews[i] for i in range(4)])

    assert batch["features"].shape == (4, 3, word_vectors.vector_size)
    assert batch["features"].dtype == torch.float32
    assert batch["mask"].sum(dim=1).tolist() == [2.0, 2.0, 3.0, 3.0]
    assert batch["labels"].tolist() == [1, 0, 1, 0]
    assert batch["labels"].dtype == torch.long
    np.testing.assert_allclose(batch["features"][0, 0].numpy(), word_vectors["great"])
    # padding stays zero
    assert torch.count_nonzero(batch["features"][0, 2]) == 0


def test_collator_time_axis_follows_longest_review(word_vectors):
    batch = ReviewCollator(word_vectors, max_length=256)([("good movie", 1), ("bad", 0)])
    assert batch["features"].shape[1] == 2


def test_collator_review_without_known_words(word_vectors):
    batch = ReviewCollator(word_vectors, max_length=8)([("zzz qqq", 0)])

    assert batch["features"].shape == (1, 1, word_vectors.vector_size)
    assert batch["mask"].sum().item() == 0.0


def test_collator_rejects_bad_length(word_vectors):
    with pytest.raises(ValueError):
        ReviewCollator(word_vectors, max_length=0)


def test_review_loader_batches(corpus_dir, word_vectors):
    loader = get_review_loader(corpus_dir, word_vectors, batch_size=2, max_length=4, train=True)
    sizes = [batch["labels"].size(0) for batch in loader]
    assert sizes == [2, 2, 1]


# -----------------------------
# Dataset writer
# -----------------------------

def _fake_batch(i):
    return {"features": torch.full((2, 3, 4), float(i)), "mask": torch.ones(2, 3), "labels": torch.tensor([1, 0])}


@pytest.mark.parametrize("n", [0, 1, 3, 12])
def test_save_datasets_names_are_contiguous(tmp_path, n):
    out_dir = tmp_path / "nested" / "train"

    count = save_datasets((_fake_batch(i) for i in range(n)), out_dir)

    assert count == n
    assert out_dir.is_dir()
    assert sorted(p.name for p in out_dir.iterdir()) == sorted(f"dataset-{i}.bin" for i in range(n))


def test_save_datasets_logs_every_interval(tmp_path, monkeypatch):
    import sentiprep.dataset as dataset_mod

    messages = []
    monkeypatch.setattr(dataset_mod, "SAVE_LOG_EVERY", 2)
    monkeypatch.setattr(dataset_mod.logger, "info", messages.append)

    save_datasets((_fake_batch(i) for i in range(5)), tmp_path)

    assert messages == ["[Save] 2 datasets saved so far...", "[Save] 4 datasets saved so far..."]


# -----------------------------
# Presaved batches
# -----------------------------

def test_presaved_batches_load_in_index_order(tmp_path):
    save_datasets((_fake_batch(i) for i in range(11)), tmp_path)

    batches = PresavedBatches(tmp_path)

    assert len(batches) == 11
    assert [int(batches[i]["features"][0, 0, 0].item()) for i in range(11)] == list(range(11))


def test_presaved_batches_empty_dir_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        PresavedBatches(tmp_path)


def test_get_dataloaders_yields_saved_batches(tmp_path):
    save_datasets((_fake_batch(i) for i in range(3)), tmp_path / "train")
    save_datasets((_fake_batch(i) for i in range(2)), tmp_path / "test")

    loaders = get_dataloaders(tmp_path / "train", tmp_path / "test", seed=0)

    train = list(loaders["train"])
    test = list(loaders["test"])
    assert len(train) == 3
    assert sorted(int(b["features"][0, 0, 0].item()) for b in train) == [0, 1, 2]
    assert [int(b["features"][0, 0, 0].item()) for b in test] == [0, 1]
    assert test[0]["features"].shape == (2, 3, 4)


def test_save_stats(tmp_path):
    import json

    out = tmp_path / "logs" / "stats.json"
    save_stats({"train": 4, "test": 2}, CLASSES, out, batch_size=64)

    stats = json.loads(out.read_text(encoding="utf-8"))
    assert stats["train_batches"] == 4
    assert stats["test_batches"] == 2
    assert stats["classes"] == ["negative", "positive"]
    assert stats["batch_size"] == 64
