# sentiprep/embeddings.py
import logging
import re
from pathlib import Path
from typing import List, Optional

from gensim.models import KeyedVectors

logger = logging.getLogger(__name__)

_BREAK_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PUNCT = re.compile(r"[\d.:,\"'()\[\]|/?!;]+")


def load_word_vectors(path, limit: Optional[int] = None) -> KeyedVectors:
    """
    Load pretrained word2vec vectors (binary by default, text for .txt/.vec).
    The returned KeyedVectors are only ever read.
    """
    path = Path(path)
    binary = path.suffix.lower() not in (".txt", ".vec")
    logger.info(f"[Word2Vec] Loading vectors from {path} (binary={binary})...")
    vectors = KeyedVectors.load_word2vec_format(str(path), binary=binary, limit=limit)
    logger.info(f"[Word2Vec] Loaded {len(vectors.index_to_key)} words, dim={vectors.vector_size}")
    return vectors


def tokenize(text: str) -> List[str]:
    text = _BREAK_TAG.sub(" ", text)
    text = _PUNCT.sub("", text)
    return text.lower().split()


def known_tokens(tokens: List[str], word_vectors: KeyedVectors) -> List[str]:
    return [t for t in tokens if t in word_vectors]
