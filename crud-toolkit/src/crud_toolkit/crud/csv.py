"""
CSV file store.

Each record occupies one line '<uuid>,<fullname>' of a plain UTF-8 text file,
with no header and no quoting, so files written here stay byte-compatible with
existing data files. The file is the only source of truth: every call reads or
rewrites it in full and nothing is cached between calls.

Writes:
    create         appends one line; the file is created on first use.
    update/delete  write the new contents to '<path>.tmp', fsync it and move it
                   over the original with 'os.replace'. A crash leaves either
                   the old or the new file in place, never a truncated one.
                   A symlinked 'path' is rewritten at its target. A file
                   that is not writable is refused even when its directory
                   is; owner and group of the new file are the caller's.

Records are matched on their parsed 'id', never on a substring of the line, so
a display name that happens to contain another record's id cannot match it.
Lines that do not parse are skipped by 'read_all' (with a warning) and carried
over unchanged by rewrites.
"""

import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path
from uuid import UUID

from loguru import logger

from crud_toolkit.crud.base import Crud, StorageIOError, T, UnknownCrudError

ENCODING = "utf-8"
LINE_TERMINATOR = "\n"
TMP_SUFFIX = ".tmp"


@contextmanager
def _translate_errors(path: Path, action: str) -> Iterator[None]:
    try:
        yield
    except UnicodeError as exc:
        raise UnknownCrudError(f"Failed to {action} '{path}': not valid {ENCODING}") from exc
    except OSError as exc:
        raise StorageIOError(f"Failed to {action} '{path}': {exc}") from exc


class CsvStore(Crud[T]):
    """
    Line-oriented file store holding one record kind.

    Attributes:
        path: The data file. Its parent directory must already exist.
        record_type: The 'Record' subclass lines are parsed into.
    """

    def __init__(self, path: str | os.PathLike[str], record_type: type[T]) -> None:
        super().__init__(record_type)
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        """Scratch file used while rewriting, next to the file 'path' resolves to."""
        target = self.path.resolve()
        return target.with_name(target.name + TMP_SUFFIX)

    def create(self, item: T) -> None:
        logger.debug(f"Creating {self.record_type.__name__} id='{item.id}' in '{self.path}'")
        terminator = LINE_TERMINATOR.encode(ENCODING)
        with _translate_errors(self.path, "append to"):
            # Encoded before opening so a record that cannot be written leaves no file behind
            data = item.to_line().encode(ENCODING) + terminator
            with open(self.path, "a+b") as file:
                # A file edited by hand may lack its final newline
                if file.tell() > 0:
                    file.seek(-1, os.SEEK_END)
                    if file.read(1) != terminator:
                        data = terminator + data
                file.write(data)

    def read_all(self) -> list[T]:
        logger.debug(f"Reading all {self.record_type.__name__} records from '{self.path}'")
        records: list[T] = []
        for number, line in enumerate(self._read_lines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(self.record_type.from_line(line))
            except ValueError as exc:
                logger.warning(f"Skipping malformed line {number} of '{self.path}': {exc}")
        return records

    def update(self, item: T) -> None:
        logger.debug(f"Updating {self.record_type.__name__} id='{item.id}' in '{self.path}'")
        self._rewrite(item.id, replacement=item.to_line())

    def delete(self, item: T) -> None:
        logger.debug(f"Deleting {self.record_type.__name__} id='{item.id}' from '{self.path}'")
        self._rewrite(item.id, replacement=None)

    def _read_lines(self) -> list[str]:
        """Return the file's lines without terminators; no lines if the file is missing."""
        with _translate_errors(self.path, "read"):
            try:
                with open(self.path, encoding=ENCODING, newline="") as file:
                    text = file.read()
            except FileNotFoundError:
                return []
        lines = text.split(LINE_TERMINATOR)
        if lines[-1] == "":
            lines.pop()
        return lines

    def _line_id(self, line: str) -> UUID | None:
        try:
            return self.record_type.from_line(line).id
        except ValueError:
            return None

    def _rewrite(self, target: UUID, replacement: str | None) -> None:
        """Rewrite the file with every line for 'target' replaced by 'replacement' (None drops it)."""
        if not self.path.exists():
            logger.debug(f"'{self.path}' does not exist, nothing to rewrite")
            return
        output: list[str] = []
        matched = 0
        for line in self._read_lines():
            if self._line_id(line) != target:
                output.append(line)
                continue
            matched += 1
            if replacement is not None:
                output.append(replacement)
        if not matched:
            logger.debug(f"No record with id='{target}' in '{self.path}'")
            return
        if matched > 1:
            logger.warning(f"Found {matched} lines with id='{target}' in '{self.path}', rewriting all of them")
        self._replace_contents(output)

    def _replace_contents(self, lines: list[str]) -> None:
        target = self.path.resolve()
        tmp_path = self.tmp_path
        with _translate_errors(self.path, "rewrite"):
            data = "".join(line + LINE_TERMINATOR for line in lines).encode(ENCODING)
            # The rename only needs a writable directory; keep read-only files read-only
            if not os.access(target, os.W_OK):
                raise PermissionError(f"'{target}' is not writable")
            try:
                with open(tmp_path, "wb") as tmp:
                    tmp.write(data)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                shutil.copymode(target, tmp_path)
                os.replace(tmp_path, target)
            except OSError:
                with suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
                raise
