"""Conversion between typed objects and their stored bytes.

An object is stored as the zlib-compressed envelope

    <kind> SP <decimal body length> NUL <body>

and the object id is the sha1 of the uncompressed envelope. Body layouts:

- blob: the content verbatim
- tree: repeated ``mode SP name NUL <20 byte id>``, sorted the way git sorts
  trees (directories compare as if their name ended with ``/``)
- commit/tag: ``key SP value`` lines, a blank line, then the message. Values
  spanning several lines continue on lines that start with a single space.
  Any other commit/tag body is kept as opaque text and written back verbatim.
"""
import re
import zlib
from typing import Iterable, Iterator

from typing_extensions import assert_never

from .addressing import compute_id, oid_to_raw, raw_to_oid, RAW_OID_LENGTH
from .errors import (
    BodyParseError,
    CorruptObjectError,
    InvalidLengthError,
    InvalidObjectError,
    MalformedHeaderError,
    SizeMismatchError,
    UnknownKindError,
)
from .types import OID, OBJECT_TYPES, Blob, Commit, GitObject, Header, ObjectInfo, ObjectType, Tag, Tree, TreeEntry

HEADER_SCAN_LIMIT = 64
ENCODING = 'utf-8'
# lets non utf-8 names and messages survive a decode/encode cycle unchanged
ENCODING_ERRORS = 'surrogateescape'

_LENGTH_RE = re.compile(rb'[0-9]+')
_MODE_RE = re.compile(r'[0-7]{1,6}')
_KINDS = {kind.encode(): kind for kind in OBJECT_TYPES}


# Serialization

def tree_sort_key(entry: TreeEntry) -> bytes:
    name = entry.name.encode(ENCODING, ENCODING_ERRORS)
    return name + b'/' if entry.is_tree else name


def _entry_problem(mode: str, name: str) -> str | None:
    if not _MODE_RE.fullmatch(mode):
        return f'bad mode {mode!r}'
    if not name or name in ('.', '..') or '/' in name or '\x00' in name:
        return f'bad entry name {name!r}'
    return None


def _serialize_tree(entries: Iterable[TreeEntry]) -> bytes:
    entries = sorted(entries, key=tree_sort_key)
    out = []
    seen = set()
    for mode, name, oid in entries:
        if problem := _entry_problem(mode, name):
            raise InvalidObjectError(problem)
        if name in seen:
            raise InvalidObjectError(f'Duplicate tree entry {name!r}')
        seen.add(name)
        out.append(f'{mode} {name}'.encode(ENCODING, ENCODING_ERRORS) + b'\x00' + oid_to_raw(oid))
    return b''.join(out)


def _serialize_headers(headers: Iterable[Header], message: str) -> bytes:
    lines = []
    for key, value in headers:
        if not key or ' ' in key or '\n' in key:
            raise InvalidObjectError(f'Bad header key {key!r}')
        value = value.replace('\n', '\n ')
        lines.append(f'{key} {value}\n')
    lines.append('\n')
    lines.append(message)
    return ''.join(lines).encode(ENCODING, ENCODING_ERRORS)


def serialize(obj: GitObject) -> bytes:
    """Return the body bytes of ``obj``, without the envelope header."""
    match obj:
        case Blob(data=data):
            return bytes(data)
        case Tree(entries=entries):
            return _serialize_tree(entries)
        case (Commit(headers=headers, message=message, opaque=opaque)
              | Tag(headers=headers, message=message, opaque=opaque)):
            if opaque:
                if headers:
                    raise InvalidObjectError(f'Opaque {obj.kind} cannot carry headers')
                return message.encode(ENCODING, ENCODING_ERRORS)
            return _serialize_headers(headers, message)
        case _:
            assert_never(obj)


def frame(kind: ObjectType, body: bytes) -> bytes:
    return f'{kind} {len(body)}'.encode() + b'\x00' + body


def envelope(obj: GitObject) -> bytes:
    return frame(obj.kind, serialize(obj))


def encode(obj: GitObject) -> tuple[OID, bytes]:
    data = envelope(obj)
    return compute_id(data), zlib.compress(data)


# Decompression

def _inflate(chunks: Iterable[bytes]) -> Iterator[bytes]:
    decompressor = zlib.decompressobj()
    try:
        for chunk in chunks:
            if out := decompressor.decompress(chunk):
                yield out
        tail = decompressor.flush()
    except zlib.error as e:
        raise CorruptObjectError(f'Bad zlib stream: {e}') from e
    if tail:
        yield tail
    if not decompressor.eof:
        raise CorruptObjectError('Truncated zlib stream')
    if decompressor.unused_data:
        raise CorruptObjectError('Garbage after end of zlib stream')


def decompress(chunks: Iterable[bytes]) -> bytes:
    return b''.join(_inflate(chunks))


# Parsing

def parse_header(header: bytes) -> ObjectInfo:
    kind, sep, length = header.partition(b' ')
    if not sep:
        raise MalformedHeaderError(f'No space in object header {header!r}')
    if kind not in _KINDS:
        raise UnknownKindError(kind.decode('ascii', 'backslashreplace'))
    if not _LENGTH_RE.fullmatch(length):
        raise InvalidLengthError(length.decode('ascii', 'backslashreplace'))
    return ObjectInfo(kind=_KINDS[kind], size=int(length))


def parse_envelope(raw: bytes) -> tuple[ObjectType, bytes]:
    nul = raw.find(b'\x00', 0, HEADER_SCAN_LIMIT)
    if nul == -1:
        raise MalformedHeaderError(f'No header terminator in the first {HEADER_SCAN_LIMIT} bytes')
    info = parse_header(raw[:nul])
    body = raw[nul + 1:]
    if len(body) != info.size:
        raise SizeMismatchError(info.size, len(body))
    return info.kind, body


def _parse_tree(body: bytes) -> tuple[TreeEntry, ...]:
    entries = []
    pos = 0
    while pos < len(body):
        space = body.find(b' ', pos)
        if space == -1:
            raise BodyParseError('tree', f'entry at offset {pos} has no mode')
        nul = body.find(b'\x00', space)
        if nul == -1:
            raise BodyParseError('tree', f'entry at offset {pos} has no name terminator')
        end = nul + 1 + RAW_OID_LENGTH
        if end > len(body):
            raise BodyParseError('tree', f'entry at offset {pos} has a truncated id')

        mode = body[pos:space].decode('ascii', 'backslashreplace')
        name = body[space + 1:nul].decode(ENCODING, ENCODING_ERRORS)
        if problem := _entry_problem(mode, name):
            raise BodyParseError('tree', problem)
        entries.append(TreeEntry(mode=mode, name=name, oid=raw_to_oid(body[nul + 1:end])))
        pos = end

    keys = [tree_sort_key(entry) for entry in entries]
    if any(a >= b for a, b in zip(keys, keys[1:])):
        raise BodyParseError('tree', 'entries are not sorted')
    # a file and a directory may not share a name even though their keys differ
    names = [entry.name for entry in entries]
    if len(set(names)) != len(names):
        raise BodyParseError('tree', 'duplicate entry names')
    return tuple(entries)


def _split_headers(text: str) -> tuple[tuple[Header, ...], str] | None:
    if text.startswith('\n'):
        block, message = '', text[1:]
    else:
        sep = text.find('\n\n')
        if sep == -1:
            return None
        block, message = text[:sep], text[sep + 2:]

    headers: list[Header] = []
    for line in block.split('\n') if block else []:
        if line.startswith(' '):
            if not headers:
                return None
            key, value = headers[-1]
            headers[-1] = (key, f'{value}\n{line[1:]}')
            continue
        key, sep, value = line.partition(' ')
        if not sep or not key:
            return None
        headers.append((key, value))
    return tuple(headers), message


def _parse_headers(body: bytes) -> tuple[tuple[Header, ...], str, bool]:
    text = body.decode(ENCODING, ENCODING_ERRORS)
    if (split := _split_headers(text)) is not None:
        headers, message = split
        if _serialize_headers(headers, message) == body:
            return headers, message, False
    return (), text, True


def parse_body(kind: ObjectType, body: bytes) -> GitObject:
    match kind:
        case 'blob':
            return Blob(data=body)
        case 'tree':
            return Tree(entries=_parse_tree(body))
        case 'commit':
            headers, message, opaque = _parse_headers(body)
            return Commit(headers=headers, message=message, opaque=opaque)
        case 'tag':
            headers, message, opaque = _parse_headers(body)
            return Tag(headers=headers, message=message, opaque=opaque)
        case _:
            assert_never(kind)


def parse(raw: bytes) -> GitObject:
    """Parse an uncompressed envelope."""
    return parse_body(*parse_envelope(raw))


def decode_stream(chunks: Iterable[bytes]) -> GitObject:
    return parse(decompress(chunks))


def decode(compressed: bytes) -> GitObject:
    return decode_stream([compressed])


def read_header(chunks: Iterable[bytes]) -> ObjectInfo:
    """Return kind and size, decompressing no further than the header."""
    buf = b''
    for piece in _inflate(chunks):
        buf += piece
        nul = buf.find(b'\x00', 0, HEADER_SCAN_LIMIT)
        if nul != -1:
            return parse_header(buf[:nul])
        if len(buf) >= HEADER_SCAN_LIMIT:
            break
    raise MalformedHeaderError(f'No header terminator in the first {HEADER_SCAN_LIMIT} bytes')
