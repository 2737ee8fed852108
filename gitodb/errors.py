"""Exceptions raised by the object store.

Everything derives from ObjectStoreError so callers handling a batch of objects
can report one failure and carry on with the rest.
"""


class ObjectStoreError(Exception):
    pass


class InvalidIdError(ObjectStoreError):
    def __init__(self, oid):
        super().__init__(f'Not a valid object id: {oid!r}')
        self.oid = oid


class RepoNotInitializedError(ObjectStoreError):
    def __init__(self, root):
        super().__init__(f'Not an initialized repository (missing {root}/objects)')
        self.root = root


class ObjectNotFoundError(ObjectStoreError):
    def __init__(self, oid):
        super().__init__(f'Object not found: {oid}')
        self.oid = oid


class ObjectIOError(ObjectStoreError):
    pass


class CorruptObjectError(ObjectStoreError):
    pass


class MalformedHeaderError(CorruptObjectError):
    pass


class UnknownKindError(CorruptObjectError):
    def __init__(self, kind):
        super().__init__(f'Unknown object type {kind!r}')
        self.kind = kind


class InvalidLengthError(CorruptObjectError):
    def __init__(self, length):
        super().__init__(f'Invalid object length {length!r}')
        self.length = length


class SizeMismatchError(CorruptObjectError):
    def __init__(self, expected, actual):
        super().__init__(f'Header says {expected} bytes, body has {actual}')
        self.expected = expected
        self.actual = actual


class BodyParseError(CorruptObjectError):
    def __init__(self, kind, detail):
        super().__init__(f'Bad {kind} object: {detail}')
        self.kind = kind
        self.detail = detail


class IdMismatchError(ObjectStoreError):
    def __init__(self, expected, actual):
        super().__init__(f'Object {expected} hashes to {actual}')
        self.expected = expected
        self.actual = actual


class UnexpectedKindError(ObjectStoreError):
    def __init__(self, oid, expected, actual):
        super().__init__(f'Expected {expected}, got {actual} for {oid}')
        self.oid = oid
        self.expected = expected
        self.actual = actual


class InvalidObjectError(ObjectStoreError, ValueError):
    """Raised when an object cannot be serialized, e.g. a tree entry named ``a/b``."""
