import hashlib
import re

from .errors import InvalidIdError
from .types import OID

OID_LENGTH = 40
RAW_OID_LENGTH = 20

_OID_RE = re.compile(r'[0-9a-f]{40}')


def compute_id(envelope: bytes) -> OID:
    return hashlib.sha1(envelope).hexdigest()


def is_valid_oid(oid) -> bool:
    return isinstance(oid, str) and _OID_RE.fullmatch(oid) is not None


def validate_oid(oid) -> OID:
    if not is_valid_oid(oid):
        raise InvalidIdError(oid)
    return oid


def locate(oid: OID, root) -> str:
    # objects/ab/cdef... keeps any single directory from holding every object
    validate_oid(oid)
    return f'{root}/objects/{oid[:2]}/{oid[2:]}'


def oid_to_raw(oid: OID) -> bytes:
    return bytes.fromhex(validate_oid(oid))


def raw_to_oid(raw: bytes) -> OID:
    assert len(raw) == RAW_OID_LENGTH, f'Expected {RAW_OID_LENGTH} bytes, got {len(raw)}'
    return raw.hex()
