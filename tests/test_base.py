from gitodb import base
from gitodb.types import Blob, Tag

HELLO_OID = 'ce013625030ba8dba906f756967f9e9ca394464a'
EMPTY_TREE_OID = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'
AUTHOR = 'A U Thor <author@example.com> 1700000000 +0000'


def test_pretty_blob_is_raw():
    assert base.pretty(Blob(b'\x00\xffraw')) == b'\x00\xffraw'


def test_pretty_tree():
    tree = base.make_tree([
        ('100644', 'hello.txt', HELLO_OID),
        ('40000', 'docs', EMPTY_TREE_OID),
        ('160000', 'vendor', HELLO_OID),
    ])
    assert base.pretty(tree).decode() == (
        f'040000 tree {EMPTY_TREE_OID}\tdocs\n'
        f'100644 blob {HELLO_OID}\thello.txt\n'
        f'160000 commit {HELLO_OID}\tvendor\n'
    )


def test_pretty_commit():
    commit = base.make_commit(EMPTY_TREE_OID, parents=[HELLO_OID], author=AUTHOR,
                              committer=AUTHOR, message='Message\n')
    assert base.pretty(commit).decode() == (
        f'tree {EMPTY_TREE_OID}\n'
        f'parent {HELLO_OID}\n'
        f'author {AUTHOR}\n'
        f'committer {AUTHOR}\n'
        '\n'
        'Message\n'
    )


def test_make_tag_fields():
    tag = base.make_tag(HELLO_OID, 'blob', 'v1', tagger=AUTHOR, message='m\n')
    assert tag.object == HELLO_OID
    assert tag.target_type == 'blob'
    assert tag.name == 'v1'
    assert tag.tagger == AUTHOR
    assert base.make_tag(HELLO_OID, 'blob', 'v1').tagger is None


def test_pretty_tag():
    tag = base.make_tag(HELLO_OID, 'blob', 'v1', tagger=AUTHOR, message='Release\n')
    assert base.pretty(tag).decode() == (
        f'object {HELLO_OID}\n'
        'type blob\n'
        'tag v1\n'
        f'tagger {AUTHOR}\n'
        '\n'
        'Release\n'
    )


def test_pretty_opaque_tag_is_verbatim():
    tag = Tag(headers=(), message='abcdefghijkl', opaque=True)
    assert base.pretty(tag) == b'abcdefghijkl'
