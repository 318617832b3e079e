"""Pydantic models for relay-style cursor pagination."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Generic, List, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel


T = TypeVar("T")

CursorValue = Union[str, int, float, datetime, date]

# Range and integrality are checked by the engine
PageSize = Optional[Union[StrictInt, StrictFloat]]


class ValueKind(str, Enum):
    """Kind tag carried by every cursor field value."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"


class SortDirection(str, Enum):
    """Sort direction of a single field."""

    ASC = "asc"
    DESC = "desc"

    def reversed(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class SortField(BaseModel):
    """One explicit field of a sort key."""

    field: str = Field(min_length=1, description="Record field name")
    kind: ValueKind = Field(default=ValueKind.STRING, description="Kind of the field's values")
    direction: SortDirection = Field(default=SortDirection.ASC, description="Sort direction")

    model_config = ConfigDict(frozen=True)


class SortKey(BaseModel):
    """Ordered sort fields plus the implicit identifier tie-break.

    The identifier always sorts last, in the same direction as the last
    explicit field, so the key defines a strict total order.
    """

    fields: Tuple[SortField, ...] = Field(min_length=1, description="Explicit sort fields")
    id_field: str = Field(default="id", min_length=1, description="Unique record identifier field")

    model_config = ConfigDict(frozen=True)

    @field_validator("fields")
    @classmethod
    def validate_unique_fields(cls, v):
        """Reject a key that names the same field twice."""
        names = [f.field for f in v]
        if len(set(names)) != len(names):
            raise ValueError(f"Sort key fields must be unique: {names}")
        return v

    @property
    def id_direction(self) -> SortDirection:
        return self.fields[-1].direction

    @property
    def field_names(self) -> List[str]:
        return [f.field for f in self.fields]

    def with_direction(self, direction: Union[SortDirection, str]) -> "SortKey":
        """Return a copy of this key where every field sorts in ``direction``."""
        direction = SortDirection(direction)
        return SortKey(
            fields=tuple(f.model_copy(update={"direction": direction}) for f in self.fields),
            id_field=self.id_field,
        )

    @classmethod
    def parse(cls, spec: str, id_field: str = "id") -> "SortKey":
        """Build a key from ``"field[:kind[:direction]],..."``.

        Example:
            SortKey.parse("createdAt:date:desc,name")
        """
        fields = []
        for part in spec.split(","):
            part = part.strip()
            if not part:
                continue
            name, _, rest = part.partition(":")
            kind, _, direction = rest.partition(":")
            fields.append(SortField(
                field=name,
                kind=ValueKind(kind or ValueKind.STRING),
                direction=SortDirection(direction or SortDirection.ASC),
            ))
        return cls(fields=tuple(fields), id_field=id_field)


class CursorField(BaseModel):
    """Value of one sort field at the cursor position."""

    field: str
    value: CursorValue
    kind: ValueKind

    model_config = ConfigDict(frozen=True)


class Cursor(BaseModel):
    """Decoded cursor: sort field values (in sort key order) plus the id."""

    fields: Tuple[CursorField, ...]
    id: Union[int, str]

    model_config = ConfigDict(frozen=True)


class PaginationArgs(BaseModel):
    """Relay pagination arguments for a single call."""

    first: PageSize = Field(default=None, description="Number of items after the cursor")
    after: Optional[str] = Field(default=None, description="Cursor to paginate forward from")
    last: PageSize = Field(default=None, description="Number of items before the cursor")
    before: Optional[str] = Field(default=None, description="Cursor to paginate backward from")
    order_by: Optional[SortDirection] = Field(
        default=None,
        alias="orderBy",
        description="Overrides the direction of every sort key field"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("after", "before", mode="before")
    @classmethod
    def empty_cursor_is_none(cls, v):
        """Treat an empty cursor string as no cursor."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class Edge(_CamelModel, Generic[T]):
    """A record paired with its cursor token."""

    node: T
    cursor: str


class PageInfo(_CamelModel):
    """Relay page metadata."""

    has_next_page: bool
    has_previous_page: bool
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


class Connection(_CamelModel, Generic[T]):
    """Paginated result: edges, page info and an optional total count."""

    edges: List[Edge[T]] = Field(default_factory=list)
    page_info: PageInfo
    total_count: Optional[int] = None

    @property
    def nodes(self) -> List[T]:
        return [edge.node for edge in self.edges]

    def to_response(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting ``totalCount`` when not computed."""
        data = self.model_dump(by_alias=True, mode="json")
        if self.total_count is None:
            data.pop("totalCount", None)
        return data
