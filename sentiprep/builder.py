# sentiprep/builder.py
"""
Builds binary datasets out of the raw IMDB text once, so that training runs
over the same corpus can load ready-made batches instead of re-tokenizing and
re-embedding every review each time.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from .config import (
    DATA_DIR,
    EXTRACTED_NAME,
    LOGS_DIR,
    STATS_FILENAME,
    TEST_DIR,
    TRAIN_DIR,
    W2V_PLACEHOLDER_PREFIX,
    WORD_VECTORS_PATH,
)
from .dataset import CLASSES, get_review_loader, save_datasets, save_stats
from .download import check_download_w2v_model, download_data
from .embeddings import load_word_vectors

logger = logging.getLogger(__name__)


def resolve_word_vectors_path(path: Optional[str], confirm: Callable[[str], str] = input) -> Path:
    path = str(path or WORD_VECTORS_PATH)
    if path.startswith(W2V_PLACEHOLDER_PREFIX):
        logger.info("[Word2Vec] Word vectors path has not been set. Checking default location for download...")
        return check_download_w2v_model(confirm=confirm)
    return Path(path)


def build_datasets(
    batch_size: int,
    max_length: int,
    word_vectors_path: Optional[str] = None,
    confirm: Callable[[str], str] = input,
    data_dir: Path = DATA_DIR,
    train_dir: Path = TRAIN_DIR,
    test_dir: Path = TEST_DIR,
) -> Dict[str, int]:
    vectors_path = resolve_word_vectors_path(word_vectors_path, confirm=confirm)
    download_data(data_dir)

    word_vectors = load_word_vectors(vectors_path)
    corpus_dir = Path(data_dir) / EXTRACTED_NAME
    train = get_review_loader(corpus_dir, word_vectors, batch_size, max_length, train=True)
    test = get_review_loader(corpus_dir, word_vectors, batch_size, max_length, train=False)

    logger.info("[Save] Saving test data...")
    n_test = save_datasets(test, test_dir)

    logger.info("[Save] Saving train data...")
    n_train = save_datasets(train, train_dir)

    counts = {"train": n_train, "test": n_test}
    save_stats(
        counts,
        CLASSES,
        LOGS_DIR / STATS_FILENAME,
        batch_size=batch_size,
        max_length=max_length,
        vector_size=word_vectors.vector_size,
    )
    logger.info(f"[Save] Wrote {n_train} train and {n_test} test batches")
    return counts
