from typing import TypeAlias, NamedTuple, Literal

OID: TypeAlias = str  # hex sha1 of an envelope
ObjectType: TypeAlias = Literal['blob', 'tree', 'commit', 'tag']
Header: TypeAlias = tuple[str, str]

OBJECT_TYPES: tuple[ObjectType, ...] = ('blob', 'tree', 'commit', 'tag')


# Object variants are tuples, but a Commit must never equal a Tag (or a bare
# tuple) holding the same fields.
def _variant_eq(self, other):
    return type(self) is type(other) and tuple.__eq__(self, other)


def _variant_ne(self, other):
    return not _variant_eq(self, other)


def _variant_hash(self):
    return hash((self.kind, tuple(self)))


class Blob(NamedTuple):
    data: bytes

    kind = 'blob'
    __eq__ = _variant_eq
    __ne__ = _variant_ne
    __hash__ = _variant_hash


class TreeEntry(NamedTuple):
    mode: str
    name: str
    oid: OID

    @property
    def is_tree(self) -> bool:
        return self.mode == '40000'


class Tree(NamedTuple):
    entries: tuple[TreeEntry, ...]

    kind = 'tree'
    __eq__ = _variant_eq
    __ne__ = _variant_ne
    __hash__ = _variant_hash


def _header_values(headers: tuple[Header, ...], key: str) -> list[str]:
    return [value for k, value in headers if k == key]


def _header_value(headers: tuple[Header, ...], key: str) -> str | None:
    values = _header_values(headers, key)
    return values[0] if values else None


class Commit(NamedTuple):
    """Headers are kept in stored order, so a decoded commit serializes back to
    the exact bytes it was read from. The accessors below only look things up.

    A body that is not a header block followed by a blank line is kept whole
    in ``message`` with ``opaque`` set, and written back verbatim.
    """
    headers: tuple[Header, ...]
    message: str
    opaque: bool = False

    kind = 'commit'
    __eq__ = _variant_eq
    __ne__ = _variant_ne
    __hash__ = _variant_hash

    @property
    def tree(self) -> OID | None:
        return _header_value(self.headers, 'tree')

    @property
    def parents(self) -> list[OID]:
        return _header_values(self.headers, 'parent')

    @property
    def author(self) -> str | None:
        return _header_value(self.headers, 'author')

    @property
    def committer(self) -> str | None:
        return _header_value(self.headers, 'committer')


class Tag(NamedTuple):
    headers: tuple[Header, ...]
    message: str
    opaque: bool = False

    kind = 'tag'
    __eq__ = _variant_eq
    __ne__ = _variant_ne
    __hash__ = _variant_hash

    @property
    def object(self) -> OID | None:
        return _header_value(self.headers, 'object')

    @property
    def target_type(self) -> str | None:
        return _header_value(self.headers, 'type')

    @property
    def name(self) -> str | None:
        return _header_value(self.headers, 'tag')

    @property
    def tagger(self) -> str | None:
        return _header_value(self.headers, 'tagger')


GitObject: TypeAlias = Blob | Tree | Commit | Tag


class ObjectInfo(NamedTuple):
    kind: ObjectType
    size: int
