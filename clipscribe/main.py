"""Entry point — wires Config → backend selection → ClipParser / transcription."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from clipscribe.clip_parser import ClipParser
from clipscribe.config import Config
from clipscribe.constants import (
    CLI_PROG,
    CMD_CLIP,
    CMD_TRANSCRIBE,
    EXIT_BACKEND_ERROR,
    EXIT_CONFIG_ERROR,
)
from clipscribe.diagnostics import Diagnostics
from clipscribe.errors import BackendError, ConfigurationError
from clipscribe.llm.selector import available_providers, check_config, select_client
from clipscribe.models import ProviderKind
from clipscribe.transcription.gemini import GeminiTranscriptionClient

logger = logging.getLogger(__name__)

# Loggers that would print request URLs, and with them the Gemini key.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def _setup_logging(level: str, debug: bool) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    list(map(lambda name: logging.getLogger(name).setLevel(logging.WARNING), _QUIET_LOGGERS))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(CLI_PROG)
    sub = parser.add_subparsers(dest="command", required=True)

    clip = sub.add_parser(CMD_CLIP, help="turn a clip description into start/end timestamps")
    clip.add_argument("duration", type=float, help="video duration in seconds")
    clip.add_argument("request", help="e.g. 'first 3 minutes'")
    clip.add_argument("--strict", action="store_true", help="re-check the answer against the duration")
    clip.add_argument(
        "--provider",
        choices=[k.value for k in ProviderKind if not k.is_media],
        help="use this backend instead of the default precedence",
    )

    transcribe = sub.add_parser(CMD_TRANSCRIBE, help="transcribe a video with Gemini")
    transcribe.add_argument("video", type=Path)
    transcribe.add_argument("-o", "--output", type=Path, help="write the transcript here")

    return parser


def _preflight(args: argparse.Namespace, config: Config) -> None:
    """Fail on missing backend settings before any event loop or client exists."""
    if args.command != CMD_CLIP or args.provider is not None:
        return
    check_config(config)
    logger.debug(
        "Configured providers: %s",
        ", ".join(kind.display_name for kind in available_providers(config)),
    )


async def _run_clip(args: argparse.Namespace, config: Config, diagnostics: Diagnostics) -> None:
    async with select_client(config, diagnostics, provider=args.provider) as client:
        parser = ClipParser(client, strict=args.strict)
        clip = await parser.parse(args.request, args.duration, on_progress=logger.info)
    print(clip.start_time, clip.end_time)


async def _run_transcribe(args: argparse.Namespace, config: Config, diagnostics: Diagnostics) -> None:
    async with GeminiTranscriptionClient.from_config(config, diagnostics) as client:
        result = await client.transcribe(args.video, on_progress=logger.info)
    match args.output:
        case None:
            print(result.text)
        case path:
            path.write_text(result.text)
            logger.info("Transcript written to %s", path)


def main(argv: Optional[list[str]] = None) -> None:
    args = _build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    config = Config.from_env()
    _setup_logging(config.log_level, config.debug)
    diagnostics = Diagnostics(enabled=config.debug)

    run = _run_clip if args.command == CMD_CLIP else _run_transcribe
    try:
        _preflight(args, config)
        asyncio.run(run(args, config, diagnostics))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        print(exc.help_text, file=sys.stderr)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc
    except (BackendError, OSError) as exc:
        logger.error("%s", exc)
        raise SystemExit(EXIT_BACKEND_ERROR) from exc


if __name__ == "__main__":
    main()
