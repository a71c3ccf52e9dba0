"""
Logging setup for the road surface monitor.

One root configuration feeds both the log file and stderr: model load and
provider selection, sampler start/stop, one INFO line per classified frame
and a traceback for every failed tick. Uvicorn's per-request access lines
are kept at WARNING so polling /api/status does not bury the results.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_path: str, log_level: str) -> None:
    log_dir = os.path.dirname(log_path)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_path),
            logging.StreamHandler(),
        ],
        force=True,
    )
    # Per-request access lines drown out the per-tick results.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
