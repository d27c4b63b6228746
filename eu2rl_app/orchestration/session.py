from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Sequence, Tuple, TypeVar

from eu2rl_app.adapters.registry import make_exporter
from eu2rl_app.adapters.spectra_csv.loader import read_spectra_csv
from eu2rl_app.domain.errors import PromptAborted
from eu2rl_app.domain.models import MaterialSpectra, RLResult, RunConfig
from eu2rl_app.domain.ports import ReportExporter
from eu2rl_app.engine.runner import RLEngine, max_rl_line
from eu2rl_app.orchestration.thickness import parse_thickness
from eu2rl_app.reports.summary import summary_markdown

__all__ = [
    "AppSession",
    "default_config",
    "init_session",
    "prompt_until_valid",
    "run_once",
    "export_result",
    "interactive_loop",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")
InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


@dataclass
class AppSession:
    """
    Thin runtime container passed between CLI, orchestration, and engine.

    `config` is the domain Pydantic model (RunConfig); `history` keeps the
    paths written by each completed run.
    """

    config: RunConfig
    last_result: RLResult | None = None
    history: List[List[Path]] = field(default_factory=list)


# -------------------------
# Session lifecycle helpers
# -------------------------


def default_config() -> RunConfig:
    """Return a fully-populated run configuration."""
    return RunConfig()


def init_session(config: RunConfig | None = None) -> AppSession:
    """Create a fresh session, with defaults unless a config is given."""
    return AppSession(config=config or default_config())


def prompt_until_valid(
    prompt: str,
    parse: Callable[[str], T],
    *,
    input_fn: InputFn | None = None,
    max_attempts: int = 3,
) -> T:
    """
    Ask for input until `parse` accepts it.

    A blank answer or EOF cancels; so does running out of attempts. Both raise
    PromptAborted. `parse` signals bad input with ValueError or OSError.
    """
    ask = input_fn or input
    for attempt in range(1, max_attempts + 1):
        try:
            answer = ask(prompt)
        except EOFError as e:
            raise PromptAborted("Input closed") from e
        if not answer.strip():
            raise PromptAborted("Cancelled by user")
        try:
            return parse(answer.strip())
        except (ValueError, OSError) as e:
            logger.warning("Invalid input (%d/%d): %s", attempt, max_attempts, e)
    raise PromptAborted(f"No valid input after {max_attempts} attempts")


def run_once(
    session: AppSession,
    spectra: MaterialSpectra,
    thicknesses: Sequence[float],
) -> RLResult:
    """Run the sweep for one sample and remember the result on the session."""
    engine = RLEngine(max_workers=session.config.max_workers)
    result = engine.run(spectra, thicknesses)
    session.last_result = result
    return result


def export_result(
    session: AppSession,
    spectra: MaterialSpectra,
    result: RLResult,
    *,
    exporter: ReportExporter | None = None,
) -> List[Path]:
    """Hand spectra and RL table to the configured exporter and save."""
    cfg = session.config
    exp = exporter or make_exporter(cfg.exporter)
    out_dir = Path(cfg.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if cfg.export.include_spectra:
        exp.export_spectrum(spectra)
    exp.export_table(result)
    written = exp.save(out_dir)

    if cfg.export.write_summary:
        md_path = out_dir / f"{result.name}_summary.md"
        md_path.write_text(summary_markdown(result, exporter=cfg.exporter), encoding="utf-8")
        written.append(md_path)

    for p in written:
        logger.info("Saved into %s", p)
    session.history.append(written)
    return written


def interactive_loop(
    session: AppSession,
    *,
    input_fn: InputFn | None = None,
    output_fn: OutputFn = print,
    exporter: ReportExporter | None = None,
) -> int:
    """
    Prompt for a file and thickness repeatedly until the user leaves the file
    name blank. Returns the number of completed runs.

    The exporter is built before the first prompt so an unavailable target
    fails before any measurement is read.
    """
    cfg = session.config
    exp = exporter or make_exporter(cfg.exporter)
    completed = 0
    while True:
        try:
            spectra: MaterialSpectra = prompt_until_valid(
                "#1/3 File name or path of the measurement (blank to quit): ",
                read_spectra_csv,
                input_fn=input_fn,
                max_attempts=cfg.max_attempts,
            )
        except PromptAborted as e:
            logger.debug("Leaving interactive loop: %s", e)
            return completed

        try:
            thick: Tuple[float, ...] = prompt_until_valid(
                "#2/3 Thickness in mm: '2, 3, 4' or 'begin : step : end': ",
                parse_thickness,
                input_fn=input_fn,
                max_attempts=cfg.max_attempts,
            )
        except PromptAborted as e:
            logger.warning("Skipping %s: %s", spectra.name, e)
            continue

        result = run_once(session, spectra, thick)
        output_fn(max_rl_line(result))
        written = export_result(session, spectra, result, exporter=exp)
        output_fn(f"#3/3 Saved {len(written)} file(s) into {cfg.output_dir}.")
        completed += 1
