"""Punctuation, stop-word and synonym dictionaries used by the normalizer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import yaml
from rich.console import Console

from .errors import DictionaryError

console = Console()

# Path to embedded default dictionaries
DEFAULT_DICTIONARIES_PATH = Path(__file__).parent / "default_dictionaries.yaml"


def _word(value: object, what: str) -> str:
    """Return ``value`` lowercased, rejecting anything but a non-blank string.

    YAML reads bare ``on``, ``no`` or ``null`` as booleans and None; those
    must be quoted in dictionary files rather than silently stringified.
    """
    if not isinstance(value, str):
        raise DictionaryError(f"{what} must be a string, got {value!r} (quote it in YAML)")
    if not value.strip():
        raise DictionaryError(f"{what} must not be blank")
    return value.lower()


@dataclass(frozen=True)
class Dictionaries:
    """Read-only lookup tables for phrase normalization.

    Attributes:
        punctuation: Single characters replaced by a space.
        stop_words: Lowercase words dropped from token streams.
        synonyms: Canonical word -> variants, in insertion order.
    """

    punctuation: frozenset[str] = frozenset()
    stop_words: frozenset[str] = frozenset()
    synonyms: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    # variant -> canonical, first group wins
    _canonical: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )

    @classmethod
    def build(
        cls,
        punctuation: Iterable[str] = (),
        stop_words: Iterable[str] = (),
        synonyms: Mapping[str, Iterable[str]] | None = None,
    ) -> Dictionaries:
        """Validate raw tables and build an immutable instance."""
        punct: set[str] = set()
        for char in punctuation:
            if not isinstance(char, str) or len(char) != 1:
                raise DictionaryError(f"Punctuation entries must be single characters: {char!r}")
            if char.isalnum() or char.isspace():
                raise DictionaryError(f"Punctuation must not contain alphanumerics: {char!r}")
            punct.add(char)

        stops = frozenset(_word(word, "Stop word") for word in stop_words)

        groups: dict[str, tuple[str, ...]] = {}
        canonical: dict[str, str] = {}
        for base, variants in (synonyms or {}).items():
            base_lower = _word(base, "Synonym group name")
            if isinstance(variants, str) or not isinstance(variants, Iterable):
                raise DictionaryError(f"Synonym group '{base_lower}' must be a list of words")
            forms = tuple(_word(v, f"Synonym of '{base_lower}'") for v in variants)

            # Canonical words always map to themselves
            owner = canonical.get(base_lower, base_lower)
            if owner != base_lower:
                raise DictionaryError(
                    f"Synonym group '{base_lower}' is already a synonym of '{owner}'"
                )
            for form in forms:
                if form != base_lower and form in groups:
                    raise DictionaryError(
                        f"Synonym '{form}' of '{base_lower}' is itself a synonym group"
                    )

            groups[base_lower] = forms
            canonical[base_lower] = base_lower
            for form in forms:
                # A variant shared by two groups stays with the earlier one
                canonical.setdefault(form, base_lower)

        return cls(
            punctuation=frozenset(punct),
            stop_words=stops,
            synonyms=MappingProxyType(groups),
            _canonical=MappingProxyType(canonical),
        )

    @classmethod
    def from_file(cls, path: Path) -> Dictionaries:
        """Load dictionaries from a YAML file.

        Missing sections are treated as empty. Raises DictionaryError when the
        file cannot be read or has the wrong shape.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DictionaryError(f"Error parsing dictionaries file {path}: {e}") from e
        except OSError as e:
            raise DictionaryError(f"Error reading dictionaries file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DictionaryError(f"Invalid dictionaries file format: {path}")

        synonyms = data.get("synonyms") or {}
        if not isinstance(synonyms, dict):
            raise DictionaryError(f"'synonyms' must be a mapping in {path}")

        return cls.build(
            punctuation=data.get("punctuation") or "",
            stop_words=data.get("stop_words") or [],
            synonyms=synonyms,
        )

    def canonical(self, word: str) -> str:
        """Return the canonical form of ``word`` (or the word itself)."""
        return self._canonical.get(word, word)

    def is_stop_word(self, word: str) -> bool:
        return word in self.stop_words

    def summary(self) -> str:
        """Return a summary of loaded tables."""
        return (
            f"Dictionaries: {len(self.punctuation)} punctuation, "
            f"{len(self.stop_words)} stop words, {len(self.synonyms)} synonym groups"
        )


@lru_cache(maxsize=None)
def _load_cached(path: Path) -> Dictionaries:
    return Dictionaries.from_file(path)


def load_dictionaries(path: Path | None = None) -> Dictionaries:
    """
    Load dictionaries once per path and share the instance.

    Args:
        path: Optional custom dictionaries YAML; embedded defaults otherwise

    Returns:
        Shared read-only Dictionaries
    """
    if path is not None:
        path = Path(path).resolve()
        if not path.exists():
            console.print(f"[yellow]Dictionaries file not found: {path}[/]")
            console.print("[dim]Falling back to defaults[/]")
            path = None
    return _load_cached(path or DEFAULT_DICTIONARIES_PATH)


def reset_dictionaries_cache() -> None:
    """Forget loaded dictionaries (useful for testing)."""
    _load_cached.cache_clear()


def save_default_dictionaries(path: Path) -> None:
    """
    Save default dictionaries to a file for user customization.

    Args:
        path: Path to save dictionaries file
    """
    import shutil

    shutil.copy(DEFAULT_DICTIONARIES_PATH, path)
    console.print(f"[green]Default dictionaries saved to: {path}[/]")
