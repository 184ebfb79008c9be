"""
Record data model and line codec.

A 'Record' is the unit every store persists: an identifier chosen by the caller
when the record is created, plus a free-text display name. Stores never mint
identifiers themselves and only ever change 'fullname' after creation.

The line codec ('to_line' / 'from_line') defines the on-disk format used by
'CsvStore': '<uuid>,<fullname>', no header, no quoting. Only the first comma
separates the two fields, so a display name may contain commas of its own. Line
breaks would split a record over two lines: they are rejected when a record
is built or a field is assigned, and again by 'to_line'.

Concrete record kinds: 'User', 'Account'.
"""

from typing import Annotated, ClassVar, Self
from uuid import UUID, uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

FIELD_SEPARATOR = ","


def _has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value


def _reject_line_breaks(value: str) -> str:
    if _has_line_break(value):
        raise ValueError("fullname must not contain line breaks")
    return value


Fullname = Annotated[str, AfterValidator(_reject_line_breaks)]


class Record(BaseModel):
    """
    Base class for stored records.

    'table_name' names the table the record kind occupies in relational stores;
    subclasses override it.

    Attributes:
        id: Identifier assigned once at creation (a fresh 'uuid4' by default).
        fullname: Display name, commas allowed, no uniqueness constraint.
    """

    model_config = ConfigDict(validate_assignment=True)

    table_name: ClassVar[str] = "records"

    id: UUID = Field(default_factory=uuid4)
    fullname: Fullname

    def to_line(self) -> str:
        """Serialise to a single line, without the line terminator.

        Raises 'ValueError' if 'fullname' holds a line break, which only an
        unvalidated record ('model_construct') can carry.
        """
        if _has_line_break(self.fullname):
            raise ValueError(f"fullname of record {self.id} contains a line break")
        return f"{self.id}{FIELD_SEPARATOR}{self.fullname}"

    @classmethod
    def from_line(cls, line: str) -> Self:
        """Parse a line produced by 'to_line'.

        A trailing '\\r' (file edited on Windows) is ignored. Raises 'ValueError'
        when the separator is missing or the identifier is not a UUID.
        """
        raw_id, separator, fullname = line.rstrip("\r").partition(FIELD_SEPARATOR)
        if not separator:
            raise ValueError(f"missing '{FIELD_SEPARATOR}' separator in {line!r}")
        return cls(id=UUID(raw_id), fullname=fullname)
