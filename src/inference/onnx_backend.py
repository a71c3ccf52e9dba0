"""
ONNX Runtime inference backend.

The execution provider is chosen once, when the session is created. An
accelerator provider is enabled only on hardware known to run the model well
and only if the installed onnxruntime build ships that provider; everything
else runs on the CPU provider.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import onnxruntime as ort

from models.config import DEFAULT_ACCELERATED_HARDWARE
from .backend import ModelExecutor, ModelLoadError

CPU_PROVIDER = "CPUExecutionProvider"
ACCELERATOR_MODES = ("auto", "cpu", "accelerated")


@dataclass(frozen=True)
class OnnxConfig:
    model_path: str
    input_name: str = "input"
    accelerator: str = "auto"
    accelerator_provider: str = "NnapiExecutionProvider"
    accelerated_hardware: Sequence[str] = field(default_factory=lambda: tuple(DEFAULT_ACCELERATED_HARDWARE))
    hardware: Optional[str] = None


def detect_hardware(cpuinfo_path: str = "/proc/cpuinfo") -> str:
    """
    Best-effort chipset identifier.

    Uses the "Hardware" line of /proc/cpuinfo (present on Android/ARM kernels)
    and falls back to platform.machine().
    """
    try:
        if os.path.exists(cpuinfo_path):
            with open(cpuinfo_path, "r") as f:
                for line in f:
                    key, _, value = line.partition(":")
                    if key.strip().lower() == "hardware" and value.strip():
                        return value.strip()
    except OSError as e:
        logging.debug(f"Could not read {cpuinfo_path}: {e}")
    return platform.machine()


def is_accelerated_hardware(hardware: Optional[str], known: Sequence[str]) -> bool:
    """True if the hardware string contains any known-good chipset id."""
    if not hardware:
        return False
    hw = hardware.lower()
    return any(k.lower() in hw for k in known)


def select_execution_providers(
    cfg: OnnxConfig,
    hardware: Optional[str],
    available: Sequence[str],
) -> List[str]:
    """Ordered provider list for the session; CPU is always last."""
    if cfg.accelerator == "cpu":
        return [CPU_PROVIDER]

    wants_accelerator = cfg.accelerator == "accelerated" or is_accelerated_hardware(
        hardware, cfg.accelerated_hardware
    )
    if not wants_accelerator:
        logging.info(f"Hardware '{hardware}' not in accelerated set, using CPU execution provider")
        return [CPU_PROVIDER]

    if cfg.accelerator_provider in available:
        logging.info(f"Hardware '{hardware}' supports acceleration, enabling {cfg.accelerator_provider}")
        return [cfg.accelerator_provider, CPU_PROVIDER]

    logging.warning(
        f"{cfg.accelerator_provider} requested but not available "
        f"(available: {list(available)}), falling back to CPU"
    )
    return [CPU_PROVIDER]


class OnnxRuntimeBackend(ModelExecutor):
    def __init__(self, cfg: OnnxConfig):
        self.cfg = cfg
        if cfg.accelerator not in ACCELERATOR_MODES:
            raise ValueError(f"accelerator must be one of {ACCELERATOR_MODES}, got {cfg.accelerator!r}")
        if not os.path.isfile(cfg.model_path):
            raise ModelLoadError(f"Model file not found: {cfg.model_path}")

        self.hardware = cfg.hardware or detect_hardware()
        logging.info(f"Device hardware: {self.hardware}")
        providers = select_execution_providers(cfg, self.hardware, ort.get_available_providers())

        try:
            self._session = ort.InferenceSession(cfg.model_path, providers=providers)
        except Exception as e:
            raise ModelLoadError(f"Failed to load model {cfg.model_path}: {e}") from e

        input_names = [i.name for i in self._session.get_inputs()]
        if cfg.input_name not in input_names:
            raise ModelLoadError(
                f"Model has no input named '{cfg.input_name}' (inputs: {input_names})"
            )
        logging.info(f"ONNX session ready: model={cfg.model_path}, providers={self.providers}")

    @property
    def providers(self) -> List[str]:
        if self._session is None:
            return []
        return list(self._session.get_providers())

    def run(self, tensor: np.ndarray) -> np.ndarray:
        if self._session is None:
            raise RuntimeError("ONNX session is closed")
        batch = tensor[np.newaxis, ...] if tensor.ndim == 3 else tensor
        outputs = self._session.run(None, {self.cfg.input_name: batch.astype(np.float32, copy=False)})
        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)

    def close(self) -> None:
        # InferenceSession has no explicit close; dropping the reference frees it.
        self._session = None
