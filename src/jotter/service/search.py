# SPDX-License-Identifier: MIT

from typing import Iterable, Optional

from jotter.model.note import Note


def __contains(query: str, text: Optional[str]) -> bool:
    """Case-insensitive substring match."""
    if text is None:
        return False
    return query.casefold() in text.casefold()


def matches(note: Note, query: Optional[str]) -> bool:
    """
    Check whether a note matches a search query.

    An empty or missing query matches every note. Otherwise the query has to
    appear in the title or the content, ignoring case. There is no
    tokenizing and no ranking.
    """
    if not query:
        return True
    return __contains(query, note["title"]) or __contains(query, note["content"])


def filter_notes(
    notes: Iterable[Note],
    query: Optional[str] = None,
    folder: Optional[str] = None,
) -> list[Note]:
    """Keep the notes matching query and folder, in their original order."""
    return [
        note
        for note in notes
        if matches(note, query) and (folder is None or note["folder"] == folder)
    ]
