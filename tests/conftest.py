# tests/conftest.py
import io
import tarfile

import numpy as np
import pytest
from gensim.models import KeyedVectors

VOCAB = ["good", "great", "bad", "awful", "movie", "plot"]
DIM = 4


def _make_archive(path, entries):
    """entries: list of (name, bytes or None for a directory), written in order."""
    with tarfile.open(path, "w:gz") as tar:
        for name, data in entries:
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return path


def write_corpus(root, split, pos, neg):
    for label, texts in (("pos", pos), ("neg", neg)):
        d = root / split / label
        d.mkdir(parents=True, exist_ok=True)
        for i, text in enumerate(texts):
            (d / f"{i}_{label}.txt").write_text(text, encoding="utf-8")


@pytest.fixture
def make_archive():
    return _make_archive


@pytest.fixture
def word_vectors():
    kv = KeyedVectors(vector_size=DIM)
    weights = np.arange(len(VOCAB) * DIM, dtype=np.float32).reshape(len(VOCAB), DIM) + 1.0
    kv.add_vectors(VOCAB, weights)
    return kv


@pytest.fixture
def corpus_dir(tmp_path):
    root = tmp_path / "aclImdb"
    write_corpus(
        root,
        "train",
        pos=["Great movie!", "Good plot, good movie.", "great"],
        neg=["Awful movie.", "Bad<br />bad plot"],
    )
    write_corpus(root, "test", pos=["good"], neg=["bad"])
    return root
