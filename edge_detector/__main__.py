"""Command-line demo for the edge detector.

Usage with an image file:
    python -m edge_detector image photo.png --threshold 60

Usage with a webcam:
    python -m edge_detector webcam --camera 0 --disable roberts

Keys in the window:
    q / Esc   quit
    + / -     raise / lower the threshold
    1 - 5     toggle sobel, roberts, prewitt, laplace, canny
"""

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Optional

import cv2
import numpy as np

from .config import (
    CAMERA_INDEX,
    CAPTURE_HEIGHT,
    CAPTURE_WIDTH,
    DEFAULT_THRESHOLD,
    LOG_FORMAT,
    OPERATOR_NAMES,
    THRESHOLD_MAX,
    THRESHOLD_MIN,
    THRESHOLD_STEP,
    WINDOW_TITLE,
)
from .display import render_results
from .errors import EdgeDetectionError
from .orchestrator import EdgeDetectionSession
from .sources import CameraSource, load_image
from .stream import FrameLoop

KEY_QUIT = (ord('q'), 27)
KEY_UP = (ord('+'), ord('='))
KEY_DOWN = (ord('-'), ord('_'))
KEY_TOGGLES = {ord(str(i + 1)): name for i, name in enumerate(OPERATOR_NAMES)}


def parse_args(argv=None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--threshold', '-t', type=int, default=DEFAULT_THRESHOLD,
                        help=f'Binarization threshold {THRESHOLD_MIN}-{THRESHOLD_MAX}')
    common.add_argument('--disable', action='append', default=[], choices=OPERATOR_NAMES,
                        help='Start with this operator disabled (repeatable)')
    common.add_argument('--workers', type=int, default=0,
                        help='Run operators on a thread pool of this size (0 = sequential)')
    common.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])

    parser = argparse.ArgumentParser(description='Real-time edge detection')
    subparsers = parser.add_subparsers(dest='command', help='Input mode')

    img = subparsers.add_parser('image', parents=[common], help='Process an image file')
    img.add_argument('path', type=Path)

    cam = subparsers.add_parser('webcam', parents=[common], help='Process a live camera stream')
    cam.add_argument('--camera', '-c', type=int, default=CAMERA_INDEX)
    cam.add_argument('--width', type=int, default=CAPTURE_WIDTH)
    cam.add_argument('--height', type=int, default=CAPTURE_HEIGHT)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        parser.exit(2)
    return args


def apply_key(
    key: int,
    session: EdgeDetectionSession,
    results: Dict[str, np.ndarray]
) -> Optional[Dict[str, np.ndarray]]:
    """Apply a key press to the session.

    Returns:
        Results to display next, or None to quit
    """
    if key in KEY_QUIT:
        return None

    if key in KEY_UP or key in KEY_DOWN:
        step = THRESHOLD_STEP if key in KEY_UP else -THRESHOLD_STEP
        value = min(THRESHOLD_MAX, max(THRESHOLD_MIN, session.threshold + step))
        if value == session.threshold:
            return results
        updated = session.set_threshold(value)
        print(f"Threshold: {value}")
        return results if updated is None else updated

    if key in KEY_TOGGLES:
        name = KEY_TOGGLES[key]
        updated = session.toggle_operator(name)
        merged = {n: buffer for n, buffer in results.items() if n != name}
        if updated:
            merged.update(updated)
        state = "on" if session.active_operators[name] else "off"
        print(f"{name}: {state}")
        return {n: merged[n] for n in OPERATOR_NAMES if n in merged}

    return results


def run_image(args: argparse.Namespace, session: EdgeDetectionSession) -> int:
    frame = load_image(args.path)
    print(f"Processing {args.path} ({frame.width}x{frame.height})")
    results = session.submit_frame(frame.pixels, frame.width, frame.height)

    try:
        while results is not None:
            cv2.imshow(WINDOW_TITLE, render_results(frame, results, session.threshold))
            key = cv2.waitKey(0) & 0xFF
            results = apply_key(key, session, results)
    finally:
        cv2.destroyAllWindows()
    return 0


def run_webcam(args: argparse.Namespace, session: EdgeDetectionSession) -> int:
    def show(frame, results):
        cv2.imshow(WINDOW_TITLE, render_results(frame, results, session.threshold))

    with CameraSource(args.camera, args.width, args.height) as camera:
        loop = FrameLoop(camera.read, session, show)

        def pump():
            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF and apply_key(key, session, {}) is None:
                loop.stop()

        print(f"Streaming from camera {args.camera}, press 'q' to quit")
        try:
            count = loop.run(on_tick=pump)
        except KeyboardInterrupt:
            loop.stop()
            count = loop.frames_processed
        finally:
            cv2.destroyAllWindows()

    print(f"Processed {count} frames")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    enabled = {name: False for name in args.disable}
    executor = ThreadPoolExecutor(max_workers=args.workers) if args.workers > 0 else None
    try:
        session = EdgeDetectionSession(args.threshold, enabled, executor=executor)
        if args.command == 'image':
            return run_image(args, session)
        return run_webcam(args, session)
    except (EdgeDetectionError, OSError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if executor is not None:
            executor.shutdown()


if __name__ == '__main__':
    sys.exit(main())
