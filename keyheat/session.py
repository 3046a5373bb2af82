# ABOUTME: Explicit analysis state and the command handlers that produce new state
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from .analyzer import KeyNormalizer, count_frequencies, tokenize
from .heatmap import (
    DEFAULT_OFFSET,
    Layout,
    LayoutRender,
    compose_layouts,
    get_color_strategy,
)
from .layouts import load_layouts
from .messages import DEFAULT_LANGUAGES, format_message
from .report import format_bigram_report, format_frequency_report
from .utils import BUNDLED_LAYOUTS_DIR


class AnalysisError(Exception):
    """A user-facing, recoverable condition that stops a command."""

    def __init__(self, message_id: str):
        super().__init__(message_id)
        self.message_id = message_id


@dataclass(frozen=True)
class AnalysisSession:
    """Results of the most recent analysis plus the loaded layouts."""

    tokens: Tuple[str, ...] = ()
    frequencies: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    layouts: Tuple[Layout, ...] = ()


@dataclass(frozen=True)
class AnalyzeLog:
    text: Optional[str]


@dataclass(frozen=True)
class LoadLayouts:
    names: Tuple[str, ...]
    directory: Union[str, Path] = BUNDLED_LAYOUTS_DIR


@dataclass(frozen=True)
class GenerateHeatmap:
    strategy: str = "lightness"
    max_scope: str = "all"
    offset: Tuple[float, float] = DEFAULT_OFFSET
    # Extra printed-label -> token aliases layered over the built-in table
    aliases: Mapping[str, Sequence[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class BigramReport:
    top_n: int = 10


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: the new session and what to show the user."""

    session: AnalysisSession
    report: Optional[str] = None
    status: Optional[str] = None
    renders: Tuple[LayoutRender, ...] = ()
    missing_layouts: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is None


def analyze_log(session: AnalysisSession, command: AnalyzeLog) -> CommandResult:
    """Tokenize and count a whole log, replacing any previous analysis."""
    if command.text is None:
        raise AnalysisError("no_log_selected")

    tokens = tuple(tokenize(command.text))
    frequencies = MappingProxyType(dict(count_frequencies(tokens)))
    logging.info(f"Analyzed {len(tokens)} key events, {len(frequencies)} distinct")

    new_session = replace(session, tokens=tokens, frequencies=frequencies)
    return CommandResult(new_session, report=format_frequency_report(frequencies))


def load_session_layouts(session: AnalysisSession, command: LoadLayouts) -> CommandResult:
    """Replace the session's layouts with whichever of the named ones load."""
    layouts = tuple(load_layouts(command.names, command.directory))
    loaded = {layout.name for layout in layouts}
    missing = tuple(name for name in command.names if name not in loaded)
    return CommandResult(replace(session, layouts=layouts), missing_layouts=missing)


def generate_heatmap(session: AnalysisSession, command: GenerateHeatmap) -> CommandResult:
    if not session.frequencies:
        raise AnalysisError("no_log_data")
    if not session.layouts:
        raise AnalysisError("layouts_not_loaded")

    renders = compose_layouts(
        session.layouts,
        session.frequencies,
        strategy=get_color_strategy(command.strategy),
        offset=command.offset,
        max_scope=command.max_scope,
        normalizer=KeyNormalizer(command.aliases),
    )
    return CommandResult(session, renders=tuple(renders))


def bigram_report(session: AnalysisSession, command: BigramReport) -> CommandResult:
    if not session.tokens:
        raise AnalysisError("no_tokens")
    return CommandResult(session, report=format_bigram_report(session.tokens, command.top_n))


Command = Union[AnalyzeLog, LoadLayouts, GenerateHeatmap, BigramReport]

HANDLERS: Dict[type, Callable[..., CommandResult]] = {
    AnalyzeLog: analyze_log,
    LoadLayouts: load_session_layouts,
    GenerateHeatmap: generate_heatmap,
    BigramReport: bigram_report,
}


def dispatch(
    session: AnalysisSession,
    command: Command,
    languages: Sequence[str] = DEFAULT_LANGUAGES,
) -> CommandResult:
    """Run a command against a session.

    Recoverable conditions come back as a status message with the prior
    session untouched.
    """
    handler = HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported command: {command!r}")

    try:
        result = handler(session, command)
    except AnalysisError as e:
        logging.warning(f"{type(command).__name__} not run: {e.message_id}")
        return CommandResult(session, status=format_message(e.message_id, languages))

    if result.missing_layouts:
        status = "\n".join(
            format_message("layout_missing", languages, name=name)
            for name in result.missing_layouts
        )
        result = replace(result, status=status)
    return result


def run_commands(
    commands: List[Command],
    session: Optional[AnalysisSession] = None,
    languages: Sequence[str] = DEFAULT_LANGUAGES,
) -> List[CommandResult]:
    """Dispatch commands in order, threading the session through."""
    session = session or AnalysisSession()
    results = []
    for command in commands:
        result = dispatch(session, command, languages)
        session = result.session
        results.append(result)
    return results
