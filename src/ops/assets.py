"""
Stage bundled assets (model, test video) into the working directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, Optional


def copy_asset(source_dir: str, work_dir: str, filename: str) -> Optional[Path]:
    """
    Copy one bundled file into work_dir.

    Returns:
        Destination path, or None if the copy failed.
    """
    src = Path(source_dir) / filename
    dest = Path(work_dir) / filename
    logging.debug(f"Copying asset {src} -> {dest}")
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
    except OSError as e:
        logging.error(f"Failed to copy asset {filename}: {e}")
        return None

    logging.info(f"Asset copied: {dest} ({dest.stat().st_size} bytes)")
    return dest


def stage_assets(source_dir: str, work_dir: str, files: Iterable[str]) -> Dict[str, Optional[Path]]:
    """
    Copy every bundled file into work_dir.

    An existing file is skipped when it is already identical in size to the
    bundled copy. Failures are logged and reported as None; callers decide
    whether a missing file is fatal.
    """
    staged: Dict[str, Optional[Path]] = {}
    for filename in files:
        src = Path(source_dir) / filename
        dest = Path(work_dir) / filename
        if dest.exists() and src.exists() and dest.stat().st_size == src.stat().st_size:
            logging.debug(f"Asset already staged: {dest}")
            staged[filename] = dest
            continue
        staged[filename] = copy_asset(source_dir, work_dir, filename)
    return staged
