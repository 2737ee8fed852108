import logging
import os
import tempfile
from contextlib import suppress
from typing import Iterator

from . import codec
from .addressing import compute_id, locate, validate_oid
from .errors import (
    IdMismatchError,
    ObjectIOError,
    ObjectNotFoundError,
    RepoNotInitializedError,
    UnexpectedKindError,
)
from .types import OID, GitObject, ObjectInfo, ObjectType

logger = logging.getLogger(__name__)

GIT_DIR = '.gitodb'
READ_CHUNK_SIZE = 64 * 1024


def init(root):
    os.makedirs(f'{root}/objects', exist_ok=True)
    os.makedirs(f'{root}/refs/heads', exist_ok=True)
    os.makedirs(f'{root}/refs/tags', exist_ok=True)
    if not os.path.isfile(f'{root}/HEAD'):
        with open(f'{root}/HEAD', 'w') as f:
            f.write('ref: refs/heads/master\n')


def _check_repo(root):
    if not os.path.isdir(f'{root}/objects'):
        raise RepoNotInitializedError(root)


def _read_chunks(f) -> Iterator[bytes]:
    while chunk := f.read(READ_CHUNK_SIZE):
        yield chunk


def _open_object(root, oid: OID):
    _check_repo(root)
    path = locate(oid, root)
    try:
        return open(path, 'rb')
    except FileNotFoundError:
        raise ObjectNotFoundError(oid) from None
    except OSError as e:
        raise ObjectIOError(f'Cannot open {path}: {e}') from e


def _read_envelope(root, oid: OID) -> bytes:
    with _open_object(root, oid) as f:
        try:
            return codec.decompress(_read_chunks(f))
        except OSError as e:
            raise ObjectIOError(f'Cannot read object {oid}: {e}') from e


def _publish(path: str, compressed: bytes) -> None:
    dirname = os.path.dirname(path)
    fd, tmp_path = tempfile.mkstemp(dir=dirname, prefix='tmp_obj_')
    try:
        with os.fdopen(fd, 'wb') as out:
            out.write(compressed)
        os.chmod(tmp_path, 0o444)
        os.replace(tmp_path, path)
    except BaseException:
        with suppress(OSError):
            os.remove(tmp_path)
        raise


def put(root, obj: GitObject, verify_existing=False) -> OID:
    _check_repo(root)
    oid, compressed = codec.encode(obj)
    path = locate(oid, root)

    if os.path.exists(path):
        if verify_existing:
            actual = compute_id(_read_envelope(root, oid))
            if actual != oid:
                raise IdMismatchError(oid, actual)
        logger.debug('%s %s already stored', obj.kind, oid)
        return oid

    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        _publish(path, compressed)
    except OSError as e:
        raise ObjectIOError(f'Cannot write object {oid}: {e}') from e
    logger.debug('Stored %s %s (%d bytes compressed)', obj.kind, oid, len(compressed))
    return oid


def get(root, oid: OID, verify=True) -> GitObject:
    validate_oid(oid)
    raw = _read_envelope(root, oid)
    obj = codec.parse(raw)
    if verify:
        actual = compute_id(raw)
        if actual != oid:
            raise IdMismatchError(oid, actual)
    logger.debug('Read %s %s', obj.kind, oid)
    return obj


def read_info(root, oid: OID) -> ObjectInfo:
    validate_oid(oid)
    with _open_object(root, oid) as f:
        try:
            return codec.read_header(_read_chunks(f))
        except OSError as e:
            raise ObjectIOError(f'Cannot read object {oid}: {e}') from e


def object_exists(root, oid: OID) -> bool:
    _check_repo(root)
    return os.path.isfile(locate(oid, root))


def hash_object(root, data: bytes, type_: ObjectType = 'blob', write=True) -> OID:
    """Store raw body bytes of the given type and return the object id.

    The body is parsed first, so a malformed tree, commit or tag is rejected
    with BodyParseError rather than written.
    """
    obj = codec.parse_body(type_, data)
    if not write:
        return compute_id(codec.frame(type_, data))
    return put(root, obj)


def get_object(root, oid: OID, expected: ObjectType | None = 'blob') -> bytes:
    validate_oid(oid)
    raw = _read_envelope(root, oid)
    type_, body = codec.parse_envelope(raw)
    if expected is not None and type_ != expected:
        raise UnexpectedKindError(oid, expected, type_)
    return body
