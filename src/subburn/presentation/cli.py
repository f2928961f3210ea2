"""CLI interface for the subtitle burn-in supervisor."""
import sys
import argparse
import logging
from pathlib import Path
from typing import Optional, List

from subburn import __version__
from subburn.application import EncodeSupervisor, JobState, QueueNotificationSink
from subburn.domain.exceptions import DomainException, ValidationError
from subburn.domain.models import JobParameters, EventType
from subburn.domain.protocols import INotificationSink
from subburn.infrastructure.config import ConfigLoader, SupervisorConfig
from subburn.infrastructure.media import (
    FFmpegWrapper,
    ProbeClient,
    EncodeArgumentBuilder,
    EncoderCapabilityCache,
    list_subtitle_styles,
)
from subburn.shared.logging import setup_logger, get_logger, LoggerAdapter
from subburn.shared.metrics import MetricsCollector

OUTPUT_FORMATS = ["mp4", "mkv", "avi", "mov"]
VIDEO_CODECS = ["libx264", "libx265", "copy"]


def create_supervisor_from_config(config: SupervisorConfig, sink: INotificationSink) -> EncodeSupervisor:
    """Create a supervisor with all dependencies from config."""
    ffmpeg = FFmpegWrapper(ffmpeg_bin=config.ffmpeg_bin, ffprobe_bin=config.ffprobe_bin)
    builder = EncodeArgumentBuilder(
        capabilities=EncoderCapabilityCache(ffmpeg),
        default_codec=config.default_codec,
        preset=config.preset,
        custom_force_style=config.custom_force_style,
        default_subtitle_encoding=config.default_subtitle_encoding,
    )

    return EncodeSupervisor(
        ffmpeg=ffmpeg,
        probe=ProbeClient(ffmpeg),
        builder=builder,
        sink=sink,
        state=JobState(lock_timeout=config.lock_timeout),
        logger=LoggerAdapter(get_logger('subburn.supervisor')),
        metrics=MetricsCollector(),
        progress_interval=config.progress_interval,
        output_suffix=config.output_suffix,
        stop_wait_timeout=config.stop_wait_timeout,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='subburn', description="Burn subtitles into a video with ffmpeg")
    parser.add_argument('--config', type=Path, help='Config YAML file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest='command', required=True)

    encode = sub.add_parser('encode', help='Run one burn-in job')
    encode.add_argument('video', help='Source video file')
    encode.add_argument('subtitle', help='Subtitle file (srt/ass/ssa)')
    encode.add_argument('--output-dir', '-o', help='Output directory (default: from config)')
    encode.add_argument('--format', '-f', dest='output_format', default='mp4', choices=OUTPUT_FORMATS, help='Output container')
    encode.add_argument('--codec', '-c', default='libx264', choices=VIDEO_CODECS, help='Video codec')
    encode.add_argument('--crf', type=int, default=23, help='Quality factor (CRF, or global_quality for hardware encoders)')
    encode.add_argument('--encoding', default=None, help='Subtitle character encoding (default: from config)')
    encode.add_argument('--style', choices=['default', 'custom'], default='default', help='Subtitle style mode')
    encode.add_argument('--style-name', help='Named ASS style')

    probe = sub.add_parser('probe', help='Show media information')
    probe.add_argument('video', help='Video file')

    styles = sub.add_parser('styles', help='List style names of an ASS/SSA file')
    styles.add_argument('subtitle', help='Subtitle file')

    sub.add_parser('ffmpeg-version', help='Show ffmpeg version')
    return parser


def log_metrics_summary(summary: dict, logger: logging.Logger) -> None:
    """Log counters and encode timing from MetricsCollector.get_summary()."""
    counters = summary.get('counters', {})
    if counters:
        logger.info("Metrics: " + ", ".join(f"{k}={v}" for k, v in sorted(counters.items())))
    encode = summary.get('metrics', {}).get('encode_seconds')
    if encode:
        logger.info(f"Encode time: {encode['sum']:.1f}s")


def run_encode(args, config: SupervisorConfig, logger: logging.Logger) -> int:
    sink = QueueNotificationSink()
    supervisor = create_supervisor_from_config(config, sink)

    try:
        params = JobParameters(
            video_path=args.video,
            subtitle_path=args.subtitle,
            output_dir=args.output_dir or str(config.default_output_dir),
            output_format=args.output_format,
            video_codec=args.codec,
            quality=args.crf,
            subtitle_encoding=args.encoding or config.default_subtitle_encoding,
            subtitle_style=args.style,
            subtitle_style_name=args.style_name,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    output_path = supervisor.start(params)
    logger.info(f"Encoding to {output_path}")

    interrupted = False
    while True:
        try:
            event = sink.get()
        except KeyboardInterrupt:
            logger.warning("Interrupted, stopping ffmpeg")
            interrupted = True
            supervisor.stop()
            continue

        if event.type is EventType.PROGRESS:
            p = event.payload
            print(f"\r{p['percentage']:5.1f}%  frame={p['frame']} fps={p['fps']:g} "
                  f"time={p['time']} speed={p['speed']}", end='', flush=True)
        elif event.type is EventType.LOG:
            logger.debug(f"ffmpeg: {event.payload['text']}")
        elif event.type is EventType.COMPLETE:
            print()
            log_metrics_summary(supervisor.metrics.get_summary(), logger)
            if interrupted:
                logger.warning(f"Stopped; partial output may remain at {event.payload['output_path']}")
                return 130
            logger.info(f"✅ Done: {event.payload['output_path']}")
            return 0
        else:
            print()
            log_metrics_summary(supervisor.metrics.get_summary(), logger)
            logger.error(f"❌ {event.payload['message']}")
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigLoader(config_path=args.config).load(
            overrides={'log_level': 'DEBUG'} if args.verbose else None
        )
    except DomainException as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logger('subburn', level=config.log_level, log_file=config.log_file)
    logger = get_logger('subburn.cli')

    try:
        if args.command == 'encode':
            return run_encode(args, config, logger)

        ffmpeg = FFmpegWrapper(ffmpeg_bin=config.ffmpeg_bin, ffprobe_bin=config.ffprobe_bin)
        if args.command == 'probe':
            info = ProbeClient(ffmpeg).probe_media_info(args.video)
            print(f"format:     {info.format}")
            print(f"duration:   {info.duration}")
            print(f"resolution: {info.resolution}")
        elif args.command == 'styles':
            for name in list_subtitle_styles(args.subtitle):
                print(name)
        elif args.command == 'ffmpeg-version':
            print(ffmpeg.get_version().strip())
        return 0

    except DomainException as e:
        logger.error(f"{e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())
