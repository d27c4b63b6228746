from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from rich.logging import RichHandler

from eu2rl_app.adapters.config_local.store import LocalConfigStore
from eu2rl_app.adapters.registry import list_exporters, make_exporter
from eu2rl_app.adapters.spectra_csv.loader import read_spectra_csv
from eu2rl_app.domain.errors import ExportError, PromptAborted
from eu2rl_app.domain.models import RunConfig
from eu2rl_app.engine.runner import max_rl_line
from eu2rl_app.orchestration.session import (
    default_config,
    export_result,
    init_session,
    interactive_loop,
    prompt_until_valid,
    run_once,
)
from eu2rl_app.orchestration.thickness import parse_thickness

logger = logging.getLogger("eu2rl_app")

HEADER = (
    "\n============================== EU2RL TOOLKIT ==============================\n"
    "      Reflection loss of metal-backed absorbers from measured ε and μ\n"
    "===========================================================================\n"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m eu2rl_app",
        description="Compute reflection-loss maps from permittivity/permeability spectra.",
    )
    parser.add_argument("files", nargs="*", help="Measurement CSV files (freq Hz, e1, e2, u1, u2)")
    parser.add_argument("-t", "--thickness", help="'3', '2, 3, 4' or 'begin : step : end' (mm)")
    parser.add_argument("-o", "--output-dir", type=Path, help="Directory for exported files")
    parser.add_argument("--exporter", choices=list_exporters(), help="Export destination")
    parser.add_argument("--config", help="Name of a stored run configuration to start from")
    parser.add_argument("--save-config", help="Store the effective configuration under this name")
    parser.add_argument("--store", type=Path, help="Configuration store directory")
    parser.add_argument("--list-configs", action="store_true", help="List stored configurations and exit")
    parser.add_argument("--delete-config", help="Remove a stored configuration and exit")
    parser.add_argument("--workers", type=int, help="Thread pool size for the thickness sweep")
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity"
    )
    return parser


def _effective_config(args: argparse.Namespace) -> RunConfig:
    store = LocalConfigStore(args.store) if (args.config or args.save_config) else None
    cfg = store.load(args.config) if (store and args.config) else default_config()

    updates: dict[str, Any] = {}
    if args.thickness is not None:
        updates["thickness"] = args.thickness
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir
    if args.exporter is not None:
        updates["exporter"] = args.exporter
    if args.workers is not None:
        updates["max_workers"] = args.workers
    if args.log_level is not None:
        updates["log_level"] = args.log_level
    if updates:
        cfg = RunConfig.model_validate({**cfg.model_dump(), **updates})

    if store and args.save_config:
        store.save(args.save_config, cfg)
    return cfg


def _manage_store(args: argparse.Namespace) -> int:
    store = LocalConfigStore(args.store)
    if args.delete_config and not store.remove(args.delete_config):
        logger.warning("No stored configuration named %s", args.delete_config)
    for name in store.list():
        sys.stdout.write(name + "\n")
    return 0


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _batch(cfg: RunConfig, files: Sequence[str]) -> int:
    session = init_session(cfg)
    # An unavailable export target fails here, before any file is read
    exporter = make_exporter(cfg.exporter)
    if cfg.thickness:
        thick = parse_thickness(cfg.thickness)
    else:
        thick = prompt_until_valid(
            "Thickness in mm: '2, 3, 4' or 'begin : step : end': ",
            parse_thickness,
            max_attempts=cfg.max_attempts,
        )
    for path in files:
        spectra = read_spectra_csv(path)
        result = run_once(session, spectra, thick)
        sys.stdout.write(max_rl_line(result) + "\n")
        export_result(session, spectra, result, exporter=exporter)
    return 0


def _interactive(cfg: RunConfig, ask_output_dir: bool) -> int:
    exporter = make_exporter(cfg.exporter)
    if ask_output_dir:
        try:
            out = prompt_until_valid(
                "#0/3 Folder to store the exported files (blank for default): ",
                Path,
                max_attempts=cfg.max_attempts,
            )
            cfg = cfg.model_copy(update={"output_dir": out})
        except PromptAborted:
            logger.debug("Keeping output folder %s", cfg.output_dir)
    session = init_session(cfg)
    runs = interactive_loop(session, exporter=exporter)
    logger.info("Completed %d run(s)", runs)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry: batch mode with files and -t, interactive otherwise."""
    args = _build_parser().parse_args(argv)
    if args.list_configs or args.delete_config:
        return _manage_store(args)
    try:
        cfg = _effective_config(args)
    except (OSError, ValueError) as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 1
    _configure_logging(cfg.log_level)
    sys.stdout.write(HEADER)

    try:
        if args.files:
            return _batch(cfg, args.files)
        return _interactive(cfg, ask_output_dir=args.output_dir is None and args.config is None)
    except (OSError, ValueError, PromptAborted, ExportError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
