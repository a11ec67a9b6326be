"""Command line entry point: realtime webcam, offline video and single image modes."""
import argparse
import logging
import sys

import cv2
import numpy as np

from .blend import blend
from .controls import DEFAULT_BLEND, DEFAULT_MODE, ControlPanel
from .devices import CameraSource, VideoFileSink, WindowSink
from .errors import AcquisitionFailure
from .export import DEFAULT_SNAPSHOT_NAME, save_png
from .filters import DEFAULT_STRENGTH, FilterMode, apply_filter
from .pixel_buffer import PixelBuffer
from .render_loop import RenderLoop

logger = logging.getLogger(__name__)

KEY_HELP = ("Keys: 1/s sketch, 2/c cartoon, 3/h charcoal, +/- strength, "
            "[/] blend, p save, q quit")


def run_realtime(args) -> int:
    """
    Runs the filter pipeline on a live webcam feed until 'q' is pressed.
    """
    controls = ControlPanel(mode=args.mode, strength=args.strength, blend_factor=args.blend)
    controls.set_status("Requesting camera access...")
    try:
        source = CameraSource(args.camera_id, width=args.width, height=args.height,
                              mirror=not args.no_mirror)
    except AcquisitionFailure as err:
        logger.error("Error: %s", err)
        return 1

    loop = None

    def on_key(key):
        action = controls.handle_key(key)
        if action == "save":
            loop.save_snapshot(args.snapshot)
        elif action == "quit":
            loop.stop()

    sink = WindowSink("Camera Drawing (Original | Processed)" if not args.processed_only
                      else "Camera Drawing", side_by_side=not args.processed_only, on_key=on_key)
    loop = RenderLoop(source, sink, controls, rng=np.random.default_rng(args.seed))

    logger.info(KEY_HELP)
    with source, sink:
        try:
            loop.run(max_frames=args.max_frames)
        except AcquisitionFailure as err:
            logger.error("Error: %s", err)
            return 1
    return 0


def run_offline(args) -> int:
    """Filters every frame of a video file into another video file."""
    controls = ControlPanel(mode=args.mode, strength=args.strength, blend_factor=args.blend)
    try:
        source = CameraSource(args.input, mirror=False)
    except AcquisitionFailure as err:
        logger.error("Error: %s", err)
        return 1

    with source, VideoFileSink(args.output, fps=source.fps, fourcc=args.fourcc) as sink:
        loop = RenderLoop(source, sink, controls, rng=np.random.default_rng(args.seed))
        try:
            shown = loop.run(max_frames=args.max_frames)
        except AcquisitionFailure as err:
            logger.error("Error: %s", err)
            return 1
    logger.info("Processed %d frames from %s into %s", shown, args.input, args.output)
    return 0


def run_image(args) -> int:
    """Filters a single still image and saves the result as PNG."""
    frame = cv2.imread(args.input)
    if frame is None:
        logger.error("Error: cannot read image %s", args.input)
        return 1

    original = PixelBuffer.from_bgr(frame)
    filtered = apply_filter(FilterMode(args.mode), original, args.strength,
                            rng=np.random.default_rng(args.seed))
    save_png(blend(original, filtered, args.blend), args.output)
    return 0


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--mode", choices=[m.value for m in FilterMode], default=DEFAULT_MODE.value,
                   help="Filter to apply")
    p.add_argument("--strength", type=float, default=DEFAULT_STRENGTH,
                   help="Edge/effect intensity multiplier [0.1..5]")
    p.add_argument("--blend", type=float, default=DEFAULT_BLEND,
                   help="Mix with the original frame [0..1], 1 = fully filtered")
    p.add_argument("--seed", type=int, default=None, help="Seed for the charcoal grain")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Camera drawing filters - sketch, cartoon, charcoal")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    subparsers = parser.add_subparsers(dest="command", required=False)

    realtime_parser = subparsers.add_parser("realtime", help="Run the filters on a live webcam")
    _add_filter_args(realtime_parser)
    realtime_parser.add_argument("--camera_id", type=int, default=0, help="Webcam device index")
    realtime_parser.add_argument("--width", type=int, default=0, help="Capture width (0 to keep default)")
    realtime_parser.add_argument("--height", type=int, default=0, help="Capture height (0 to keep default)")
    realtime_parser.add_argument("--no_mirror", action="store_true", help="Do not flip the camera image")
    realtime_parser.add_argument("--processed_only", action="store_true",
                                 help="Show only processed view instead of side-by-side")
    realtime_parser.add_argument("--snapshot", default=DEFAULT_SNAPSHOT_NAME,
                                 help="Where 'p' saves the current frame")
    realtime_parser.add_argument("--max_frames", type=int, default=None, help="Stop after this many frames")

    offline_parser = subparsers.add_parser("offline", help="Run the filters over a video file")
    _add_filter_args(offline_parser)
    offline_parser.add_argument("--input", default="input.mp4", help="Path to input video file")
    offline_parser.add_argument("--output", default="output.mp4", help="Path to output video file")
    offline_parser.add_argument("--fourcc", default="mp4v", help="Codec of the output video")
    offline_parser.add_argument("--max_frames", type=int, default=None, help="Stop after this many frames")

    image_parser = subparsers.add_parser("image", help="Filter a single image into a PNG")
    _add_filter_args(image_parser)
    image_parser.add_argument("--input", required=True, help="Path to input image")
    image_parser.add_argument("--output", default=DEFAULT_SNAPSHOT_NAME, help="Path to output PNG")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    if args.command == "offline":
        return run_offline(args)
    if args.command == "image":
        return run_image(args)
    # Default to realtime if no subcommand provided
    if args.command is None:
        argv = list(sys.argv[1:] if argv is None else argv)
        args = parser.parse_args(argv + ["realtime"])
    return run_realtime(args)

