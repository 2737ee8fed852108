from typing import Iterable

from typing_extensions import assert_never

from . import codec
from .types import OID, Blob, Commit, GitObject, Header, Tag, Tree, TreeEntry


def make_tree(entries: Iterable[TreeEntry | tuple[str, str, OID]]) -> Tree:
    """Build a tree with its entries in git tree order."""
    entries = [TreeEntry(*entry) for entry in entries]
    return Tree(entries=tuple(sorted(entries, key=codec.tree_sort_key)))


def make_commit(tree: OID, parents: Iterable[OID] = (), author: str | None = None,
                committer: str | None = None, message: str = '',
                extra: Iterable[Header] = ()) -> Commit:
    headers: list[Header] = [('tree', tree)]
    headers.extend(('parent', parent) for parent in parents)
    if author is not None:
        headers.append(('author', author))
    if committer is not None:
        headers.append(('committer', committer))
    headers.extend(extra)
    return Commit(headers=tuple(headers), message=message)


def make_tag(object_: OID, type_: str, name: str, tagger: str | None = None,
             message: str = '') -> Tag:
    headers: list[Header] = [('object', object_), ('type', type_), ('tag', name)]
    if tagger is not None:
        headers.append(('tagger', tagger))
    return Tag(headers=tuple(headers), message=message)


def _entry_type(mode: str) -> str:
    if mode == '40000':
        return 'tree'
    if mode == '160000':
        return 'commit'
    return 'blob'


def pretty(obj: GitObject) -> bytes:
    match obj:
        case Blob(data=data):
            return data
        case Tree(entries=entries):
            return ''.join(f'{mode:0>6} {_entry_type(mode)} {oid}\t{name}\n'
                           for mode, name, oid in entries).encode(codec.ENCODING, codec.ENCODING_ERRORS)
        case Commit() | Tag():
            return codec.serialize(obj)
        case _:
            assert_never(obj)
