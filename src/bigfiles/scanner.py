"""Directory scanning and ranking for list-big-files."""

import logging
import os
import stat
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Generator, Optional, Union

from bigfiles.models import FileEntry, ScanConfig, ScanResult, ScanThreshold

logger = logging.getLogger(__name__)

# Paths handed to a worker at a time
BATCH_SIZE = 256


class RootUnavailableError(Exception):
    """Raised when the scan root is missing or cannot be listed."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot scan {root}: {reason}")


def _report_skip(
    on_error: Optional[Callable[[str, OSError], None]], path: str, error: OSError
) -> None:
    logger.debug("Skipping %s: %s", path, error)
    if on_error:
        on_error(path, error)


def iter_regular_files(
    root: Union[str, Path],
    follow_symlinks: bool = False,
    visited: Optional[set[tuple[int, int]]] = None,
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> Generator[str, None, None]:
    """
    Walk a directory tree and yield the path of every regular file.

    Uses os.scandir with an explicit stack, so deep trees do not hit the
    recursion limit. Unreadable directories and entries are skipped.

    Args:
        root: Directory to walk
        follow_symlinks: If False, symlinks are leaves and never reported.
            If True, linked directories are descended into once each.
        visited: (st_dev, st_ino) of directories already walked, only used
            when following symlinks. Updated in place.
        on_error: Optional callback(path, error) for each skipped entry

    Yields:
        File paths, joined onto root as given
    """
    root = os.fspath(root)

    if follow_symlinks:
        if visited is None:
            visited = set()
        try:
            st = os.stat(root)
            visited.add((st.st_dev, st.st_ino))
        except OSError as e:
            _report_skip(on_error, root, e)
            return

    stack = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=follow_symlinks):
                            if follow_symlinks:
                                st = entry.stat()
                                key = (st.st_dev, st.st_ino)
                                # Already walked: a link cycle or a second link to it
                                if key in visited:
                                    continue
                                visited.add(key)
                            stack.append(entry.path)
                        elif entry.is_file(follow_symlinks=follow_symlinks):
                            yield entry.path
                    except OSError as e:
                        _report_skip(on_error, entry.path, e)
        except OSError as e:
            _report_skip(on_error, current, e)


def check_files(
    paths: list[str],
    min_size_bytes: int,
    follow_symlinks: bool = False,
) -> tuple[list[FileEntry], int]:
    """
    Stat a batch of paths and keep the regular files at or above a size.

    Runs inside a worker thread and only touches its own lists.

    Args:
        paths: File paths to check
        min_size_bytes: Inclusive size threshold
        follow_symlinks: Whether to stat the target of a link

    Returns:
        Tuple of (qualifying entries, number of paths skipped on errors)
    """
    entries: list[FileEntry] = []
    skipped = 0

    for path in paths:
        try:
            st = os.stat(path, follow_symlinks=follow_symlinks)
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
            skipped += 1
            continue

        if not stat.S_ISREG(st.st_mode):
            continue

        if st.st_size >= min_size_bytes:
            entries.append(FileEntry(path=path, size_bytes=st.st_size))

    return entries, skipped


def rank_entries(entries: list[FileEntry]) -> list[FileEntry]:
    """Sort entries largest first, breaking ties by path."""
    return sorted(entries, key=lambda e: (-e.size_bytes, e.path))


def _check_root(root: str) -> None:
    try:
        st = os.stat(root)
    except OSError as e:
        raise RootUnavailableError(root, e.strerror or str(e)) from e

    if not stat.S_ISDIR(st.st_mode):
        raise RootUnavailableError(root, "not a directory")

    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise RootUnavailableError(root, e.strerror or str(e)) from e


def scan(
    root: Union[str, Path],
    threshold: ScanThreshold,
    config: Optional[ScanConfig] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> ScanResult:
    """
    Find regular files under root at or above the threshold.

    Paths are enumerated on the calling thread and stat'ed in batches by a
    thread pool. Each batch returns its own entries; finished batches are
    merged while the walk continues, and the merged entries are sorted once
    all batches finish, so the result does not depend on the number of
    workers.

    Args:
        root: Directory to scan
        threshold: Minimum file size
        config: Worker count and symlink handling (defaults if None)
        progress_callback: Optional callback(files_checked) after each batch

    Returns:
        ScanResult with entries sorted by size descending

    Raises:
        RootUnavailableError: If root is missing, not a directory or unreadable
    """
    config = config or ScanConfig()
    root = os.fspath(root)
    _check_root(root)

    start = time.perf_counter()
    walk_skipped = 0

    def on_walk_error(path: str, error: OSError) -> None:
        nonlocal walk_skipped
        walk_skipped += 1

    entries: list[FileEntry] = []
    scanned_count = 0
    stat_skipped = 0
    checked = 0

    with ThreadPoolExecutor(max_workers=config.resolved_workers) as executor:
        future_to_size = {}

        def submit(batch: list[str]) -> None:
            future = executor.submit(
                check_files, batch, threshold.min_size_bytes, config.follow_symlinks
            )
            future_to_size[future] = len(batch)

        def collect(future) -> None:
            nonlocal stat_skipped, checked
            batch_entries, skipped = future.result()
            entries.extend(batch_entries)
            stat_skipped += skipped
            checked += future_to_size.pop(future)
            if progress_callback:
                progress_callback(checked)

        batch: list[str] = []
        for path in iter_regular_files(
            root, follow_symlinks=config.follow_symlinks, on_error=on_walk_error
        ):
            scanned_count += 1
            batch.append(path)
            if len(batch) >= BATCH_SIZE:
                submit(batch)
                batch = []
                # Merge finished batches while the walk is still going
                for future in [f for f in future_to_size if f.done()]:
                    collect(future)

        if batch:
            submit(batch)

        for future in as_completed(list(future_to_size)):
            collect(future)

    elapsed = time.perf_counter() - start
    skipped_count = walk_skipped + stat_skipped

    logger.info(
        "Scanned %d files under %s in %.2fs: %d matched, %d skipped",
        scanned_count,
        root,
        elapsed,
        len(entries),
        skipped_count,
    )

    return ScanResult(
        root=root,
        threshold=threshold,
        entries=rank_entries(entries),
        scanned_count=scanned_count,
        skipped_count=skipped_count,
        elapsed_seconds=elapsed,
    )
