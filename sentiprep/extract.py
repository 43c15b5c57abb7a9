# sentiprep/extract.py
import logging
import sys
import tarfile
from dataclasses import dataclass
from pathlib import Path

from .config import EXTRACT_BUFFER_SIZE, EXTRACT_PROGRESS_EVERY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionStats:
    files: int
    dirs: int


def _member_target(output_dir: Path, name: str) -> Path:
    root = output_dir.resolve()
    target = (output_dir / name).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"Archive member escapes output directory: {name!r}")
    return output_dir / name


def extract_tar_gz(
    archive_path: Path,
    output_dir: Path,
    buffer_size: int = EXTRACT_BUFFER_SIZE,
    create_parents: bool = False,
) -> ExtractionStats:
    """
    Stream a .tar.gz archive into output_dir, entry by entry, in archive order.

    File data is copied through a fixed-size buffer so memory stays bounded no
    matter how large an entry is. Parent directories of a file are expected to
    come from an earlier directory entry; pass create_parents=True to create
    them on demand instead.
    """
    output_dir = Path(output_dir)
    file_count, dir_count = 0, 0
    print("[Extract] Extracting files", end="", flush=True)

    with tarfile.open(archive_path, mode="r|gz") as tar:
        for member in tar:
            target = _member_target(output_dir, member.name)

            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
                dir_count += 1
                continue

            if not member.isfile():
                logger.debug(f"[Extract] Skipping non-regular entry: {member.name}")
                continue

            if create_parents:
                target.parent.mkdir(parents=True, exist_ok=True)
            with tar.extractfile(member) as src, open(target, "wb") as dest:
                while True:
                    data = src.read(buffer_size)
                    if not data:
                        break
                    dest.write(data)
            file_count += 1

            if file_count % EXTRACT_PROGRESS_EVERY == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

    print(f"\n[Extract] {file_count} files and {dir_count} directories extracted to: {output_dir}")
    return ExtractionStats(files=file_count, dirs=dir_count)
