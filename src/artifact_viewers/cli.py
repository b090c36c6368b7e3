"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from artifact_viewers.config.schema import AppConfig
from artifact_viewers.errors import ArtifactViewerError
from artifact_viewers.hydra_utils import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_CONFIG_PATH,
    compose_config,
    format_config,
    settings_from_config,
)
from artifact_viewers.logging_utils import (
    DEFAULT_LOGGER_NAME,
    LoggingReporter,
    configure_logging,
    log_exception,
    parse_log_level,
    run_with_error_handling,
)
from artifact_viewers.mlmd.memory import InMemoryMetadataStore
from artifact_viewers.mlmd.resolver import MlmdGraphResolver
from artifact_viewers.outputs import load_output_viewers
from artifact_viewers.storage import FileReader, HttpFileReader, LocalFileReader
from artifact_viewers.visualization import HttpVisualizationService

_SUBCOMMANDS: Sequence[str] = (
    "help",
    "cfg",
    "outputs",
    "mlmd",
)


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config-path",
        default=DEFAULT_CONFIG_PATH,
        help="Path to the Hydra config directory.",
    )
    parser.add_argument(
        "--config-name",
        default=DEFAULT_CONFIG_NAME,
        help="Hydra config name (without extension).",
    )


def _load_settings(args: argparse.Namespace) -> AppConfig:
    overrides = getattr(args, "overrides", None) or []
    config_dir = Path(args.config_path)
    if not config_dir.exists() and not overrides:
        # Installed CLI run outside a checkout: fall back to schema defaults.
        settings = settings_from_config(None)
    else:
        cfg = compose_config(
            config_path=args.config_path,
            config_name=args.config_name,
            overrides=overrides,
        )
        settings = settings_from_config(cfg)
    configure_logging(
        parse_log_level(settings.logging.level),
        fmt=settings.logging.format,
        force=True,
    )
    return settings


def _build_reader(settings: AppConfig) -> FileReader:
    if settings.artifacts.local_root:
        return LocalFileReader(settings.artifacts.local_root)
    return HttpFileReader(settings.artifacts.base_url, timeout=settings.artifacts.timeout)


def _print_viewers(viewers: Iterable[Any]) -> None:
    print(json.dumps([viewer.to_dict() for viewer in viewers], indent=2))


def _cfg_handler(args: argparse.Namespace) -> None:
    cfg = compose_config(
        config_path=args.config_path,
        config_name=args.config_name,
        overrides=args.overrides,
    )
    output = format_config(cfg)
    print(output, end="")


def _outputs_handler(args: argparse.Namespace) -> None:
    settings = _load_settings(args)
    viewers = asyncio.run(
        load_output_viewers(args.metadata_path, _build_reader(settings))
    )
    _print_viewers(viewers)


def _mlmd_handler(args: argparse.Namespace) -> None:
    settings = _load_settings(args)
    store = InMemoryMetadataStore.from_snapshot(args.snapshot)
    service = HttpVisualizationService(
        settings.visualization.base_url,
        namespace=settings.visualization.namespace,
        timeout=settings.visualization.timeout,
    )
    logger = logging.getLogger(f"{DEFAULT_LOGGER_NAME}.cli")
    resolver = MlmdGraphResolver(
        store,
        service,
        reporter=LoggingReporter(logging.getLogger(f"{DEFAULT_LOGGER_NAME}.mlmd")),
        context_type=settings.mlmd.context_type,
        pod_name_property=settings.mlmd.pod_name_property,
        state_property=settings.mlmd.state_property,
        complete_state=settings.mlmd.complete_state,
    )
    viewers = asyncio.run(
        resolver.resolve(
            args.pod_name,
            lambda progress: logger.debug("Progress: %d%%", progress),
        )
    )
    _print_viewers(viewers)


def _register_help_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    parser: argparse.ArgumentParser,
) -> None:
    def _handler(_args: argparse.Namespace) -> None:
        parser.print_help()

    help_parser = subparsers.add_parser(
        "help",
        help="Show top-level help.",
        description="Show top-level help.",
    )
    help_parser.set_defaults(handler=_handler)


def _register_cfg_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    cfg_parser = subparsers.add_parser(
        "cfg",
        help="Compose and print Hydra config.",
        description="Compose and print Hydra config.",
    )
    _add_config_arguments(cfg_parser)
    cfg_parser.add_argument(
        "overrides",
        nargs=argparse.REMAINDER,
        help="Hydra overrides (ex: artifacts.base_url=http://ui:3000).",
    )
    cfg_parser.set_defaults(handler=_cfg_handler)


def _register_outputs_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    outputs_parser = subparsers.add_parser(
        "outputs",
        help="Build viewers from a run's output metadata file.",
        description=(
            "Read an output metadata document (gs://, minio://, s3://, http(s)://) "
            "and print the resulting viewer configs as JSON."
        ),
    )
    outputs_parser.add_argument(
        "metadata_path",
        help="Location of the output metadata document.",
    )
    _add_config_arguments(outputs_parser)
    outputs_parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Hydra override (repeatable).",
    )
    outputs_parser.set_defaults(handler=_outputs_handler)


def _register_mlmd_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    mlmd_parser = subparsers.add_parser(
        "mlmd",
        help="Build viewers for a pod's artifacts recorded in ML metadata.",
        description=(
            "Walk a metadata store snapshot from the pod's run context to its "
            "output artifacts and print the rendered viewers as JSON."
        ),
    )
    mlmd_parser.add_argument("pod_name", help="Pod name (<pipeline>-<workflow>-<node>).")
    mlmd_parser.add_argument(
        "--snapshot",
        required=True,
        help="JSON snapshot of the metadata store.",
    )
    _add_config_arguments(mlmd_parser)
    mlmd_parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Hydra override (repeatable).",
    )
    mlmd_parser.set_defaults(handler=_mlmd_handler)


def _build_parser(subcommands: Iterable[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artifact-viewers",
        description="artifact_viewers command line interface.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name in subcommands:
        if name == "help":
            _register_help_subcommand(subparsers, parser)
        elif name == "cfg":
            _register_cfg_subcommand(subparsers)
        elif name == "outputs":
            _register_outputs_subcommand(subparsers)
        elif name == "mlmd":
            _register_mlmd_subcommand(subparsers)
    return parser


def _cli_main(
    *,
    cli_logger: logging.Logger,
    argv: Optional[Sequence[str]] = None,
) -> None:
    parser = _build_parser(_SUBCOMMANDS)
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    try:
        args.handler(args)
    except ArtifactViewerError as exc:
        log_exception(cli_logger, exc, show_traceback=args.traceback)
        raise SystemExit(1) from None


def main() -> None:
    """Entry point with standard logging/error handling."""
    logger = configure_logging()
    run_with_error_handling(_cli_main, logger=logger, cli_logger=logger)


if __name__ == "__main__":
    main()
