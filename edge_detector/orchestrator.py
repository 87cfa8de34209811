"""Frame orchestration: fan a grayscale frame out to the enabled operators.

process_frame() is a pure function of its arguments. EdgeDetectionSession
is the caller-owned holder of the mutable bits (threshold, enabled
operators, most recent frame) and reprocesses when they change.
"""

import logging
import threading
import time
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

import numpy as np

from .buffers import BufferLayout, resolve_layout
from .config import DEFAULT_THRESHOLD, OPERATOR_NAMES
from .grayscale import to_grayscale
from .operators import get_operator
from .threshold import apply_threshold, validate_threshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingSettings:
    """Snapshot of threshold and enabled operators for one processing pass."""
    threshold: int = DEFAULT_THRESHOLD
    enabled: FrozenSet[str] = field(default_factory=lambda: frozenset(OPERATOR_NAMES))

    def __post_init__(self):
        validate_threshold(self.threshold)
        for name in self.enabled:
            get_operator(name)
        object.__setattr__(self, "enabled", frozenset(self.enabled))

    @classmethod
    def from_flags(cls, threshold: int, flags: Mapping[str, bool]) -> "ProcessingSettings":
        """Build settings from an active-operator mapping (name -> enabled)."""
        for name in flags:
            get_operator(name)
        return cls(threshold, frozenset(name for name, on in flags.items() if on))

    @property
    def active_operators(self) -> Dict[str, bool]:
        return {name: name in self.enabled for name in OPERATOR_NAMES}

    def enabled_names(self) -> Tuple[str, ...]:
        """Enabled operators in display order."""
        return tuple(name for name in OPERATOR_NAMES if name in self.enabled)


def run_operator(name: str, gray: np.ndarray, layout: BufferLayout, threshold: int) -> np.ndarray:
    """Run one operator and binarize its output."""
    operator = get_operator(name)
    raw = operator.apply(gray, layout.width, layout.height, layout)
    return apply_threshold(raw, threshold, layout)


def process_frame(
    gray,
    width: int,
    height: int,
    settings: ProcessingSettings,
    layout: Optional[BufferLayout] = None,
    executor: Optional[Executor] = None,
    only: Optional[Iterable[str]] = None
) -> Dict[str, np.ndarray]:
    """Run every enabled operator on a grayscale frame.

    Args:
        gray: Flat grayscale buffer
        width: Frame width in pixels
        height: Frame height in pixels
        settings: Threshold and enabled operators for this pass
        layout: Buffer layout, RGBA by default
        executor: Optional executor; each operator becomes one task
        only: Restrict the pass to these operators (still subject to settings)

    Returns:
        Dict mapping operator name to thresholded buffer, enabled
        operators only, in display order

    Raises:
        InvalidBufferLength: If gray doesn't match the layout (before any
            operator runs)
        UnknownOperatorName: If only names an unknown operator
    """
    layout = resolve_layout(width, height, layout)
    flat = layout.validate(gray)

    names = settings.enabled_names()
    if only is not None:
        wanted = {get_operator(name).name for name in only}
        names = tuple(name for name in names if name in wanted)

    start = time.perf_counter()
    if executor is not None:
        futures = {
            name: executor.submit(run_operator, name, flat, layout, settings.threshold)
            for name in names
        }
        results = {name: future.result() for name, future in futures.items()}
    else:
        results = {name: run_operator(name, flat, layout, settings.threshold) for name in names}

    logger.debug(
        "Processed %dx%d frame with %s at threshold %d in %.1fms",
        width, height, ", ".join(names) or "no operators", settings.threshold,
        (time.perf_counter() - start) * 1000
    )
    return results


class EdgeDetectionSession:
    """Holds threshold, operator toggles and the most recent frame."""

    def __init__(
        self,
        threshold: int = DEFAULT_THRESHOLD,
        enabled: Optional[Mapping[str, bool]] = None,
        executor: Optional[Executor] = None
    ):
        """Initialize session.

        Args:
            threshold: Initial binarization threshold
            enabled: Initial operator flags; unnamed operators start enabled
            executor: Optional executor for running operators in parallel
        """
        self._lock = threading.Lock()
        self._threshold = validate_threshold(threshold)
        self._active = {name: True for name in OPERATOR_NAMES}
        for name, on in (enabled or {}).items():
            self._active[get_operator(name).name] = bool(on)
        self._executor = executor
        self._last_gray: Optional[np.ndarray] = None
        self._last_layout: Optional[BufferLayout] = None

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def active_operators(self) -> Dict[str, bool]:
        with self._lock:
            return dict(self._active)

    @property
    def settings(self) -> ProcessingSettings:
        with self._lock:
            return ProcessingSettings.from_flags(self._threshold, self._active)

    @property
    def last_frame(self) -> Optional[Tuple[np.ndarray, BufferLayout]]:
        """Most recent grayscale buffer and its layout, if any."""
        with self._lock:
            if self._last_gray is None:
                return None
            return self._last_gray, self._last_layout

    def submit_frame(
        self,
        pixels,
        width: int,
        height: int,
        layout: Optional[BufferLayout] = None
    ) -> Optional[Dict[str, np.ndarray]]:
        """Convert a raw frame to grayscale, remember it and process it.

        Returns:
            Operator results, or None if the frame size isn't known yet
            (zero width or height) and the frame was skipped
        """
        if not width or not height:
            logger.debug("Deferring frame with unknown size %sx%s", width, height)
            return None

        layout = resolve_layout(width, height, layout)
        gray = to_grayscale(pixels, layout)
        with self._lock:
            self._last_gray = gray
            self._last_layout = layout
            settings = ProcessingSettings.from_flags(self._threshold, self._active)
        return self._process(gray, layout, settings)

    def set_threshold(self, value: int) -> Optional[Dict[str, np.ndarray]]:
        """Change the threshold and reprocess the most recent frame.

        Raises:
            InvalidThreshold: If value is not an integer in [0, 255]
        """
        value = validate_threshold(value)
        with self._lock:
            self._threshold = value
        logger.info("Threshold set to %d", value)
        return self.reprocess()

    def set_operator_enabled(self, name: str, enabled: bool) -> Optional[Dict[str, np.ndarray]]:
        """Enable or disable an operator.

        Enabling re-runs only that operator on the most recent frame.
        Disabling runs nothing.

        Returns:
            {name: buffer} when enabling with a frame available, {} when
            disabling, None when there is no frame yet

        Raises:
            UnknownOperatorName: If name isn't one of the five operators
        """
        name = get_operator(name).name
        with self._lock:
            self._active[name] = bool(enabled)
            settings = ProcessingSettings.from_flags(self._threshold, self._active)
            gray, layout = self._last_gray, self._last_layout
        logger.info("Operator %s %s", name, "enabled" if enabled else "disabled")

        if not enabled:
            return {}
        if gray is None:
            return None
        return self._process(gray, layout, settings, only=(name,))

    def toggle_operator(self, name: str) -> Optional[Dict[str, np.ndarray]]:
        """Flip an operator's flag, see set_operator_enabled."""
        name = get_operator(name).name
        with self._lock:
            enabled = not self._active[name]
        return self.set_operator_enabled(name, enabled)

    def reprocess(self) -> Optional[Dict[str, np.ndarray]]:
        """Re-run all enabled operators on the most recent frame, if any."""
        with self._lock:
            settings = ProcessingSettings.from_flags(self._threshold, self._active)
            gray, layout = self._last_gray, self._last_layout
        if gray is None:
            return None
        return self._process(gray, layout, settings)

    def _process(
        self,
        gray: np.ndarray,
        layout: BufferLayout,
        settings: ProcessingSettings,
        only: Optional[Iterable[str]] = None
    ) -> Dict[str, np.ndarray]:
        return process_frame(
            gray, layout.width, layout.height, settings,
            layout=layout, executor=self._executor, only=only
        )
