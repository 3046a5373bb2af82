# ABOUTME: Analysis engine for key-press logs: tokens, frequencies, special keys and bigrams
import re
from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging

Bigram = Tuple[str, str]

_WHITESPACE = re.compile(r"\s+")

# Printed layout label (lower-cased) -> logged tokens, in lookup priority order
SPECIAL_KEY_TABLE: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "tab": ("<Tab>", "tab"),
        "capslock": ("<CapsLock>", "capslock"),
        "全角/半角": ("<F>", "<H>"),
        "shift": ("<ShiftLeft>", "<ShiftRight>", "shift"),
        "ctrl": ("<ControlLeft>", "<ControlRight>", "ctrl"),
        "win": ("<MetaLeft>", "<MetaRight>", "win"),
        "alt": ("<AltLeft>", "<AltRight>", "alt"),
        "esc": ("<Escape>", "esc"),
        "space": ("<Space>", "space", " "),
        "backspace": ("<Backspace>", "backspace"),
        "delete": ("<Delete>", "delete"),
        "enter": ("<Enter>", "<Return>", "enter"),
        "app": ("<App>", "app"),
    }
)


def tokenize(text: str) -> List[str]:
    """Split a raw key log into tokens on any run of whitespace."""
    return [token for token in _WHITESPACE.split(text) if token]


def count_frequencies(tokens: Iterable[str]) -> Counter:
    """Count token occurrences, keeping first-seen order for ties."""
    frequencies: Counter = Counter()
    for token in tokens:
        frequencies[token] += 1
    return frequencies


def rank_frequencies(
    frequencies: Mapping[str, int], top_n: Optional[int] = None
) -> List[Tuple[str, int]]:
    """Rank tokens by count descending; equal counts keep first-seen order."""
    return _rank(frequencies, top_n)


def count_bigrams(tokens: Sequence[str]) -> Counter:
    """Count ordered pairs of adjacent tokens."""
    bigrams: Counter = Counter()
    for i in range(len(tokens) - 1):
        bigrams[(tokens[i], tokens[i + 1])] += 1
    return bigrams


def rank_bigrams(bigrams: Mapping[Bigram, int], top_n: int) -> List[Tuple[Bigram, int]]:
    """Return the ``top_n`` most frequent bigrams, ties in first-seen order."""
    if top_n < 1:
        raise ValueError(f"top_n must be a positive integer, got {top_n}")
    return _rank(bigrams, top_n)


def _rank(counts: Mapping, top_n: Optional[int]) -> List[Tuple]:
    # sorted() is stable, so equal counts stay in insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked if top_n is None else ranked[:top_n]


def resolve_key_frequency(
    printed_key: str,
    frequencies: Mapping[str, int],
    table: Mapping[str, Sequence[str]] = SPECIAL_KEY_TABLE,
) -> int:
    """Look up how often a printed layout key appears in the log.

    Special-key aliases are tried first, in table order; the first alias the
    mapping contains wins even when its stored count is zero. Without a
    matching alias the printed key is looked up verbatim, then 0.
    """
    candidates = table.get(printed_key.lower())
    if candidates:
        for token in candidates:
            if token in frequencies:
                return frequencies[token]
    if printed_key in frequencies:
        return frequencies[printed_key]
    return 0


class KeyNormalizer:
    """Resolve printed key labels against a frequency mapping."""

    def __init__(self, extra_aliases: Optional[Mapping[str, Sequence[str]]] = None):
        table: Dict[str, Tuple[str, ...]] = dict(SPECIAL_KEY_TABLE)
        for label, tokens in (extra_aliases or {}).items():
            if isinstance(tokens, str):
                tokens = [tokens]
            table[label.lower()] = tuple(tokens)
            logging.debug(f"Special key alias {label.lower()} -> {list(tokens)}")
        self.table: Mapping[str, Tuple[str, ...]] = MappingProxyType(table)

    def resolve(self, printed_key: str, frequencies: Mapping[str, int]) -> int:
        return resolve_key_frequency(printed_key, frequencies, self.table)
