"""String helpers that leave quoted SQL literals untouched."""
from __future__ import annotations

import re
from collections.abc import Callable, Iterator

# A single- or double-quoted literal; backslash escapes and doubled quotes
# both end up inside a matched literal.
_QUOTED = re.compile(r"""('(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")""", re.DOTALL)


def split_outside_quotes(subject: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(segment, is_quoted)`` pairs covering ``subject`` in order."""
    for index, segment in enumerate(_QUOTED.split(subject)):
        if segment:
            yield segment, bool(index % 2)


def replace_outside_quotes(
    subject: str,
    search: str,
    replace: str | Callable[[], str],
) -> str:
    """Replace ``search`` everywhere except inside quoted literals.

    ``replace`` may be a callable, invoked once per occurrence, which lets
    callers substitute a different value for each match.
    """
    if search not in subject:
        return subject
    pieces: list[str] = []
    for segment, quoted in split_outside_quotes(subject):
        if quoted or search not in segment:
            pieces.append(segment)
        elif callable(replace):
            parts = segment.split(search)
            rebuilt = parts[0]
            for part in parts[1:]:
                rebuilt += replace() + part
            pieces.append(rebuilt)
        else:
            pieces.append(segment.replace(search, replace))
    return "".join(pieces)
