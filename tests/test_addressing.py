import hashlib

import pytest

from gitodb.addressing import compute_id, is_valid_oid, locate, oid_to_raw, raw_to_oid
from gitodb.errors import InvalidIdError

HELLO_OID = 'ce013625030ba8dba906f756967f9e9ca394464a'


def test_compute_id_hashes_whole_envelope():
    assert compute_id(b'blob 6\x00hello\n') == HELLO_OID
    assert compute_id(b'blob 0\x00') == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_compute_id_is_deterministic_and_sensitive():
    envelope = b'blob 3\x00abc'
    assert compute_id(envelope) == compute_id(bytes(envelope))
    assert compute_id(envelope) != compute_id(b'blob 3\x00abd')
    assert compute_id(envelope) == hashlib.sha1(envelope).hexdigest()


def test_locate_splits_fan_out_directory(tmp_path):
    path = locate(HELLO_OID, tmp_path)
    assert path == f'{tmp_path}/objects/ce/013625030ba8dba906f756967f9e9ca394464a'


@pytest.mark.parametrize('oid', [
    '',
    'ce01',
    HELLO_OID.upper(),
    HELLO_OID + '0',
    'g' * 40,
    None,
])
def test_locate_rejects_invalid_ids(tmp_path, oid):
    assert not is_valid_oid(oid)
    with pytest.raises(InvalidIdError):
        locate(oid, tmp_path)


def test_raw_conversion():
    raw = oid_to_raw(HELLO_OID)
    assert len(raw) == 20
    assert raw_to_oid(raw) == HELLO_OID
