"""Inclusion filters that select which sentences the parser should decode."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Iterable, Optional, Union

from .enums import SentenceKind, Source

__all__ = ("SentenceFilter", "combine_filters")


def _combine_flags(values, enum_type, what: str):
    result = enum_type(0)
    for value in values:
        if isinstance(value, enum_type):
            result |= value
        elif isinstance(value, str):
            try:
                result |= enum_type[value.upper()]
            except KeyError:
                raise ValueError(f"unknown {what}: {value!r}") from None
        else:
            raise ValueError(f"invalid {what}: {value!r}")
    return result


def _flag_names(value) -> list[str]:
    return [member.name.lower() for member in type(value) if member in value]


def _intersect(first, second):
    if first is None:
        return second
    if second is None:
        return first
    return first & second


def _unite(first, second):
    if first is None or second is None:
        return None
    return first | second


@dataclass
class SentenceFilter:
    """Pair of inclusion sets consulted by the parser before a sentence is
    decoded.

    Sentences whose source or kind is excluded are dropped silently; the
    parser reports neither a result nor an error for them.
    """

    #: Sources to accept; `None` means all sources
    sources: Optional[Source] = None

    #: Sentence kinds to accept; `None` means all sentence kinds
    sentences: Optional[SentenceKind] = None

    @classmethod
    def from_json(cls, data):
        result = cls()
        result.update_from_json(data)
        return result

    @property
    def json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.sources is not None:
            result["sources"] = _flag_names(self.sources)
        if self.sentences is not None:
            result["sentences"] = _flag_names(self.sentences)
        return result

    @property
    def is_unrestricted(self) -> bool:
        """Returns whether the filter accepts every sentence."""
        return self.sources is None and self.sentences is None

    def accepts(self, source: Source, kind: SentenceKind) -> bool:
        """Returns whether a sentence with the given source and kind passes
        the filter.
        """
        if not self.accepts_source(source):
            return False
        if self.sentences is not None and kind not in self.sentences:
            return False
        return True

    def accepts_source(self, source: Source) -> bool:
        """Returns whether sentences from the given source may pass the
        filter, regardless of their kind.
        """
        return self.sources is None or source in self.sources

    def intersection(self, other: SentenceFilter) -> SentenceFilter:
        """Returns a filter that accepts sentences accepted by both this
        filter and the other one.
        """
        return SentenceFilter(
            sources=_intersect(self.sources, other.sources),
            sentences=_intersect(self.sentences, other.sentences),
        )

    def union(self, other: SentenceFilter) -> SentenceFilter:
        """Returns a filter whose inclusion sets are the unions of the sets of
        this filter and the other one.
        """
        return SentenceFilter(
            sources=_unite(self.sources, other.sources),
            sentences=_unite(self.sentences, other.sentences),
        )

    __and__ = intersection
    __or__ = union

    def reset_to_defaults(self) -> None:
        """Resets the filter to accept everything."""
        self.sources = None
        self.sentences = None

    def set_sources(self, sources: Optional[Iterable[Union[str, Source]]]) -> None:
        """Restricts the filter to the given sources; `None` lifts the
        restriction.
        """
        if sources is None:
            self.sources = None
        else:
            self.sources = _combine_flags(sources, Source, "source")

    def set_sentences(
        self, sentences: Optional[Iterable[Union[str, SentenceKind]]]
    ) -> None:
        """Restricts the filter to the given sentence kinds; `None` lifts the
        restriction.
        """
        if sentences is None:
            self.sentences = None
        else:
            self.sentences = _combine_flags(sentences, SentenceKind, "sentence kind")

    def update_from_json(self, data, *, reset: bool = False) -> None:
        """Updates the filter from its JSON representation.

        Parameters:
            data: the JSON object, e.g. ``{"sources": ["gps"], "sentences":
                ["gga", "rmc"]}``; missing keys leave the corresponding set
                unchanged, `None` values lift the restriction
            reset: whether to reset the filter to accept everything before
                applying the update

        Raises:
            ValueError: if the format of the JSON object is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("filter settings object missing or invalid")

        if reset:
            self.reset_to_defaults()

        for key, setter in (
            ("sources", self.set_sources),
            ("sentences", self.set_sentences),
        ):
            if key in data:
                value = data[key]
                if value is not None and (
                    isinstance(value, str) or not isinstance(value, list)
                ):
                    raise ValueError(f"{key} must be a list of names")
                setter(value)


def combine_filters(filters: Iterable[SentenceFilter]) -> SentenceFilter:
    """Returns the intersection of all the given filters."""
    return reduce(SentenceFilter.intersection, filters, SentenceFilter())


