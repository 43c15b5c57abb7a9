# sentiprep/download.py
import hashlib
import logging
from pathlib import Path
from typing import Callable

import requests
from tqdm import tqdm

from .config import (
    ARCHIVE_NAME,
    DATA_DIR,
    DATA_URL,
    EXTRACTED_NAME,
    W2V_DEFAULT_DIR,
    W2V_DOWNLOAD_RETRIES,
    W2V_FILENAME,
    W2V_MD5,
    W2V_URL,
)
from .extract import extract_tar_gz

logger = logging.getLogger(__name__)


def download_file(url: str, dest: Path, chunk_size: int = 8192) -> Path:
    """Stream url into dest with a byte progress bar."""
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    with requests.get(url, stream=True) as response:
        response.raise_for_status()
        total_size = int(response.headers.get("content-length", 0))
        with open(dest, "wb") as f, tqdm(
            desc=dest.name,
            total=total_size or None,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
        ) as bar:
            for chunk in response.iter_content(chunk_size=chunk_size):
                if chunk:
                    f.write(chunk)
                    bar.update(len(chunk))
    return dest


def md5_of_file(path: Path, chunk_size: int = 1 << 20) -> str:
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(chunk_size), b""):
            digest.update(block)
    return digest.hexdigest()


def download_with_checksum(url: str, dest: Path, md5: str, max_tries: int = W2V_DOWNLOAD_RETRIES) -> Path:
    """
    Download url to dest until its MD5 matches, at most max_tries times.
    HTTP and filesystem errors are not retried.
    """
    if max_tries < 1:
        raise ValueError(f"max_tries must be >= 1, got {max_tries}")
    dest = Path(dest)
    for attempt in range(1, max_tries + 1):
        download_file(url, dest)
        actual = md5_of_file(dest)
        if actual == md5:
            return dest
        logger.warning(f"[Download] Checksum mismatch for {dest.name} (attempt {attempt}/{max_tries}): {actual}")
        dest.unlink()
    raise RuntimeError(f"Could not download {url} with md5 {md5} after {max_tries} attempts")


def download_data(data_dir: Path = DATA_DIR, url: str = DATA_URL) -> Path:
    """
    Fetch and unpack the IMDB archive into data_dir, skipping whatever is
    already on disk. Presence is the only signal; contents are not verified.
    """
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    archive_path = data_dir / ARCHIVE_NAME
    extracted_path = data_dir / EXTRACTED_NAME

    if not archive_path.exists():
        logger.info("[Download] Starting data download (80MB)...")
        download_file(url, archive_path)
        logger.info(f"[Download] Data (.tar.gz file) downloaded to {archive_path.resolve()}")
        extract_tar_gz(archive_path, data_dir)
    else:
        logger.info(f"[Download] Data (.tar.gz file) already exists at {archive_path.resolve()}")
        if not extracted_path.exists():
            extract_tar_gz(archive_path, data_dir)
        else:
            logger.info(f"[Download] Data (extracted) already exists at {extracted_path.resolve()}")
    return extracted_path


def check_download_w2v_model(
    model_dir: Path = W2V_DEFAULT_DIR,
    confirm: Callable[[str], str] = input,
    url: str = W2V_URL,
    md5: str = W2V_MD5,
    max_tries: int = W2V_DOWNLOAD_RETRIES,
) -> Path:
    """
    Make sure a verified copy of the Google News vectors sits in model_dir.

    An existing file with the right MD5 is reused. Otherwise the user is asked
    to confirm through `confirm` before the 1.5GB download starts.
    """
    model_dir = Path(model_dir)
    model_path = model_dir / W2V_FILENAME

    if model_path.exists():
        logger.info(f"[Word2Vec] {W2V_FILENAME} found at path: {model_dir}")
        logger.info("[Word2Vec] Checking md5 of existing file...")
        if md5_of_file(model_path) == md5:
            logger.info("[Word2Vec] Existing file hash matches.")
            return model_path
        logger.info("[Word2Vec] Existing file hash doesn't match. Retrying download...")
    else:
        logger.info(f"[Word2Vec] No previous download of {W2V_FILENAME} found at path: {model_dir}")

    logger.warning(f"[Word2Vec] {W2V_FILENAME} is a 1.5GB file.")
    confirm(f'Press "ENTER" to start a download of {W2V_FILENAME} to {model_dir}')
    logger.info("[Word2Vec] Starting model download (1.5GB!)...")
    download_with_checksum(url, model_path, md5, max_tries=max_tries)
    logger.info(f"[Word2Vec] Successfully downloaded word2vec model to {model_path}")
    return model_path
