"""Copy-on-write selection of code files.

A SelectionSet is an immutable value: ``toggle`` and ``clear`` return a new
set and never change the one a reader may be holding mid-render.  Insertion
order is part of the contract: the first-inserted file still present is the
batch comparison target, regardless of how the other files were toggled.
"""

from __future__ import annotations

from collections.abc import Iterator

from codesim.models.code_file import CodeFile


class SelectionSet:
    """Ordered, id-unique collection of selected files."""

    __slots__ = ("_files", "_index")

    def __init__(self, files: tuple[CodeFile, ...] = ()) -> None:
        index: dict[int, int] = {}
        kept: list[CodeFile] = []
        for f in files:
            if f.id in index:
                continue
            index[f.id] = len(kept)
            kept.append(f)
        self._files = tuple(kept)
        self._index = index

    def toggle(self, file: CodeFile) -> "SelectionSet":
        """Remove ``file`` if its id is selected, otherwise append it."""
        if file.id in self._index:
            return SelectionSet(tuple(f for f in self._files if f.id != file.id))
        return SelectionSet(self._files + (file,))

    def clear(self) -> "SelectionSet":
        return SelectionSet()

    def contains(self, file: CodeFile | int) -> bool:
        """Identity test by id only; content and language are ignored."""
        file_id = file if isinstance(file, int) else file.id
        return file_id in self._index

    def size(self) -> int:
        return len(self._files)

    @property
    def files(self) -> tuple[CodeFile, ...]:
        return self._files

    def ids(self) -> tuple[int, ...]:
        return tuple(f.id for f in self._files)

    @property
    def target(self) -> CodeFile | None:
        """Earliest-inserted file still present, or None when empty."""
        return self._files[0] if self._files else None

    @property
    def others(self) -> tuple[CodeFile, ...]:
        """Every selected file after the target, in insertion order."""
        return self._files[1:]

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[CodeFile]:
        return iter(self._files)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (CodeFile, int)):
            return self.contains(item)
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self.ids() == other.ids()

    def __hash__(self) -> int:
        return hash(self.ids())

    def __repr__(self) -> str:
        return f"SelectionSet(ids={list(self.ids())})"
