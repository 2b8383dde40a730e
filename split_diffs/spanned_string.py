# split_diffs/spanned_string.py
"""A string whose substrings can be marked by arbitrary attributes.

The string can be iterated over to get substrings with the list of
attributes applied to them, in the order they were applied.

Example:
    s = SpannedString.create()
    s.append_string("one", "b").append_string(" ").append_string("two", "b", "i")
    list(s.iter_substrings())
    # [("one", ["b"]), (" ", []), ("two", ["b", "i"])]

Internally every span is stored as two markers sharing an id: a start
marker at the first offset and an end marker at the offset just past the
last character. Markers live in a table with one slot per offset
(``len(text) + 1`` slots), most of which are empty.
"""

from typing import Dict, Generic, Iterator, List, NamedTuple, Optional, Set, Tuple, TypeVar

from .display_width import char_widths, display_width
from .errors import InvalidRangeError

T = TypeVar("T")


class SpanMarker(NamedTuple):
    """One boundary of a span."""
    id: int
    attribute: object
    is_start: bool


Boundaries = List[Optional[List[SpanMarker]]]


class SpannedString(Generic[T]):
    """Attributed string supporting chained construction and slicing.

    All mutating operations (``add_span``, ``append_string``,
    ``append_spanned_string``, ``fill_width``) modify only the receiver
    and return it, so calls can be chained. ``slice`` always returns a
    new, independent instance.
    """

    def __init__(self, string: str, boundaries: Boundaries, next_id: int):
        self._string = string
        self._boundaries = boundaries
        self._next_id = next_id

    @classmethod
    def create(cls) -> "SpannedString[T]":
        """Create an empty string with no spans."""
        return cls("", [None], 0)

    def __len__(self) -> int:
        return len(self._string)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._string!r})"

    def _markers_at(self, index: int) -> List[SpanMarker]:
        markers = self._boundaries[index]
        if markers is None:
            markers = []
            self._boundaries[index] = markers
        return markers

    def add_span(self, start: int, end: int, attribute: T) -> "SpannedString[T]":
        """Apply ``attribute`` to the half-open range ``[start, end)``.

        Raises:
            InvalidRangeError: If the range is outside the string or reversed.
        """
        if start < 0 or end < start or end > len(self._string):
            raise InvalidRangeError(start, end, len(self._string))

        span_id = self._next_id
        self._next_id += 1
        self._markers_at(start).append(SpanMarker(span_id, attribute, True))
        self._markers_at(end).append(SpanMarker(span_id, attribute, False))
        return self

    def append_string(self, string: str, *attributes: T) -> "SpannedString[T]":
        """Append raw text, applying each of ``attributes`` to it in order."""
        start = len(self._string)
        end = start + len(string)

        self._string += string
        self._boundaries.extend([None] * len(string))

        for attribute in attributes:
            self.add_span(start, end, attribute)

        return self

    def append_spanned_string(self, other: "SpannedString[T]") -> "SpannedString[T]":
        """Append ``other``'s text and spans without modifying ``other``.

        The last slot of this string and the first slot of ``other``
        overlap, so their markers are merged. Ids of ``other`` are offset
        by this string's id counter so that both id spaces stay disjoint.
        """
        other_string = other._string
        other_boundaries = list(other._boundaries)
        other_next_id = other._next_id

        junction = len(self._string)
        id_offset = self._next_id

        self._string += other_string
        self._boundaries.extend([None] * len(other_string))

        for other_index, markers in enumerate(other_boundaries):
            if not markers:
                continue
            self._markers_at(junction + other_index).extend(
                SpanMarker(marker.id + id_offset, marker.attribute, marker.is_start)
                for marker in markers
            )

        self._next_id += other_next_id
        return self

    def slice(self, start: int, end: Optional[int] = None) -> "SpannedString[T]":
        """Return a new string over ``[start, end)`` keeping active attributes.

        Attributes that started before ``start`` are re-opened at offset 0
        of the result and attributes still open at ``end`` are closed at the
        result's last offset.

        Raises:
            InvalidRangeError: If ``start`` or ``end`` is negative.
        """
        length = len(self._string)
        if end is None:
            end = length
        if start < 0 or end < 0:
            raise InvalidRangeError(start, end, length)
        start = min(start, length)
        end = min(end, length)
        if start >= end:
            return type(self).create()

        boundaries: Boundaries = [None] * (end - start + 1)
        active: Dict[int, SpanMarker] = {}

        for index in range(start):
            _apply_markers(active, self._boundaries[index])

        # Spans that close exactly at `start` cover nothing in the slice
        markers_at_start = self._boundaries[start] or []
        closing_at_start = {m.id for m in markers_at_start if not m.is_start}
        first: List[SpanMarker] = [
            SpanMarker(marker.id, marker.attribute, True)
            for marker in _ordered(active)
            if marker.id not in closing_at_start
        ]
        opened: Set[int] = {marker.id for marker in first}
        for marker in markers_at_start:
            if marker.is_start:
                first.append(marker)
                opened.add(marker.id)
                active[marker.id] = marker
            else:
                if marker.id in opened:
                    first.append(marker)
                active.pop(marker.id, None)
        boundaries[0] = first or None

        for index in range(start + 1, end):
            markers = self._boundaries[index]
            if markers:
                boundaries[index - start] = list(markers)
                _apply_markers(active, markers)

        last = [
            SpanMarker(marker.id, marker.attribute, False)
            for marker in _ordered(active)
        ]
        boundaries[end - start] = last or None

        return type(self)(self._string[start:end], boundaries, self._next_id)

    def fill_width(self, width: int, fill_char: str = " ") -> "SpannedString[T]":
        """Append ``fill_char`` until the display width reaches ``width``.

        The filler carries no attribute. Does nothing if the string is
        already at least ``width`` columns wide.
        """
        missing = width - self.get_width()
        fill_width = max(display_width(fill_char), 1)
        if missing > 0:
            self.append_string(fill_char * (missing // fill_width))
        return self

    def get_string(self) -> str:
        """Return the raw text without attributes."""
        return self._string

    def get_width(self) -> int:
        """Return the terminal display width of the text."""
        return display_width(self._string)

    def get_char_widths(self) -> List[int]:
        """Return the terminal display width of every character."""
        return char_widths(self._string)

    def iter_substrings(self) -> Iterator[Tuple[str, List[T]]]:
        """Yield ``(substring, attributes)`` runs covering the whole string.

        A new run starts at every offset where some span starts or ends.
        Attributes are listed in the order they were applied.
        """
        active: Dict[int, SpanMarker] = {}

        last_index = 0
        for index in range(len(self._string) + 1):
            markers = self._boundaries[index]
            if not markers:
                continue

            if index > last_index:
                yield self._string[last_index:index], _attributes(active)

            _apply_markers(active, markers)
            last_index = index

        if last_index < len(self._string):
            yield self._string[last_index:], _attributes(active)


def _apply_markers(
    active: Dict[int, SpanMarker], markers: Optional[List[SpanMarker]]
) -> None:
    if not markers:
        return
    for marker in markers:
        if marker.is_start:
            active[marker.id] = marker
        else:
            active.pop(marker.id, None)


def _ordered(active: Dict[int, SpanMarker]) -> List[SpanMarker]:
    return sorted(active.values(), key=lambda marker: marker.id)


def _attributes(active: Dict[int, SpanMarker]) -> list:
    # Attributes are returned in the order they were applied
    return [marker.attribute for marker in _ordered(active)]
