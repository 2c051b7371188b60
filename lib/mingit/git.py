"""Git object format library.

mingit stores objects exactly as git stores loose objects: the
envelope "<kind> <size>\\0<content>" is hashed with SHA-1, compressed
with zlib, and written to objects/<2 hex>/<38 hex> under the
repository.  This module holds the pure codecs for that format; the
store itself is in mingit.repo.
"""

from binascii import hexlify, unhexlify
from collections import namedtuple
import os, re, zlib

from mingit.helpers import Sha1


class GitError(Exception):
    pass

class FormatError(GitError):
    """Malformed object, tree, or commit data."""

class InvalidHash(GitError, ValueError):
    pass

class CorruptObject(GitError):
    pass

class UnexpectedKind(GitError):
    def __init__(self, oid, kind, expected):
        self.oid = oid
        self.kind = kind
        self.expected = expected
        GitError.__init__(self, 'object %s is a %s, not a %s'
                          % (hexlify(oid).decode('ascii'),
                             kind.decode('ascii'), expected.decode('ascii')))

class MissingObject(GitError, KeyError):
    def __init__(self, oid):
        self.oid = oid
        KeyError.__init__(self, f'object {hexlify(oid).decode("ascii")} is missing')
    def __str__(self):
        return self.args[0]


BLOB, TREE, COMMIT = b'blob', b'tree', b'commit'
OBJECT_KINDS = frozenset((BLOB, TREE, COMMIT))

GIT_MODE_FILE = 0o100644
GIT_MODE_TREE = 0o40000

EMPTY_TREE_OIDX = b'4b825dc642cb6eb9a060e54bf8d69288fbee4904'

GitObject = namedtuple('GitObject', ['kind', 'size', 'content'])
TreeEntry = namedtuple('TreeEntry', ['mode', 'kind', 'oidx', 'name'])


def _check_kind(kind):
    if kind not in OBJECT_KINDS:
        raise FormatError('unknown object kind %r' % kind)


def calc_digest(data):
    """Return the raw SHA-1 digest of data."""
    return Sha1(data).digest()


def calc_hash(kind, content):
    """Calculate some content's hash in the Git fashion, i.e. over the
    whole envelope, without building the envelope."""
    _check_kind(kind)
    sum = Sha1(b'%s %d\0' % (kind, len(content)))
    sum.update(content)
    return sum.digest()


_hex_rx = re.compile(br'[0-9a-fA-F]{40}\Z')

def oid_from_hex(oidx):
    """Return the 20 raw bytes for the 40 character hex hash oidx
    (bytes or str)."""
    if isinstance(oidx, str):
        oidx = oidx.encode('ascii', 'replace')
    if not _hex_rx.match(oidx):
        raise InvalidHash('invalid object hash %r' % oidx)
    return unhexlify(oidx)

def oid_to_hex(oid):
    """Return the lowercase 40 character hex (bytes) form of oid."""
    if len(oid) != 20:
        raise InvalidHash('object id %r is not 20 bytes' % oid)
    return hexlify(oid)


def object_path(root, oid):
    """Return the path of the object file for oid under the repository
    root: objects/ followed by a two character fan-out directory."""
    oidx = oid_to_hex(oid)
    return os.path.join(root, b'objects', oidx[:2], oidx[2:])


def compress(data, level=1):
    if level not in range(-1, 10):
        raise ValueError('invalid compression level %s' % level)
    z = zlib.compressobj(level)
    return z.compress(data) + z.flush()


def decompress(data):
    z = zlib.decompressobj()
    try:
        result = z.decompress(data)
        result += z.flush()
    except zlib.error as ex:
        raise CorruptObject('cannot decompress object: %s' % ex) from ex
    if not z.eof:
        raise CorruptObject('truncated object (%d compressed bytes)'
                            % len(data))
    return result


def decompress_prefix(data, size):
    """Return (at most) the first size bytes of the decompressed data."""
    z = zlib.decompressobj()
    try:
        return z.decompress(data, size)
    except zlib.error as ex:
        raise CorruptObject('cannot decompress object: %s' % ex) from ex


def encode_object(kind, content):
    """Return the envelope "<kind> <size>\\0<content>" for content."""
    _check_kind(kind)
    return b'%s %d\0%s' % (kind, len(content), content)


def decode_header(data):
    """Return (kind, size, header_len) for the envelope at the start of
    data."""
    sp = data.find(b' ')
    if sp < 0:
        raise FormatError('object header has no kind delimiter')
    z = data.find(b'\0', sp + 1)
    if z < 0:
        raise FormatError('object header has no size delimiter')
    kind = data[:sp]
    _check_kind(kind)
    size = data[sp + 1:z]
    if not size.isdigit():
        raise FormatError('invalid object size %r' % size)
    return kind, int(size), z + 1


def decode_object(data):
    """Return the GitObject encoded (uncompressed) in data."""
    kind, size, ofs = decode_header(data)
    content = data[ofs:]
    if len(content) != size:
        raise CorruptObject('%s object claims %d bytes, has %d'
                            % (kind.decode('ascii'), size, len(content)))
    return GitObject(kind, size, content)


def check_tree_name(name):
    """Raise a FormatError unless name can be stored in a tree.

    Tree entries have no length prefix, so the name must not contain
    either of the record delimiters (space and NUL).
    """
    if not name:
        raise FormatError('tree entry name is empty')
    if b'\0' in name or b' ' in name:
        raise FormatError('tree entry name %r contains a space or NUL' % name)
    if name in (b'.', b'..') or b'/' in name:
        raise FormatError('invalid tree entry name %r' % name)


def tree_item_sort_key(ent):
    # Names only; git itself sorts directories as if they ended in "/".
    return ent[1]


def tree_encode(shalist):
    """Generate git tree content from (mode, name, oid) tuples."""
    shalist = sorted(shalist, key=tree_item_sort_key)
    l = []
    prev = None
    for (mode, name, bin) in shalist:
        check_tree_name(name)
        if name == prev:
            raise FormatError('duplicate tree entry name %r' % name)
        prev = name
        assert mode > 0, mode
        if len(bin) != 20:
            raise InvalidHash('tree entry %r has a %d byte hash'
                              % (name, len(bin)))
        l.append(b'%o %s\0%s' % (mode, name, bin))
    return b''.join(l)


def tree_iter(tree_data):
    """Yield (mode, name, oid) for each entry in the git tree_data."""
    ofs = 0
    end = len(tree_data)
    while ofs < end:
        mode_end = tree_data.find(b' ', ofs)
        if mode_end < 0:
            raise FormatError('tree entry at offset %d has no mode delimiter'
                              % ofs)
        z = tree_data.find(b'\0', mode_end + 1)
        if z < 0:
            raise FormatError('tree entry at offset %d has no name delimiter'
                              % ofs)
        mode = tree_data[ofs:mode_end]
        if not mode or mode.strip(b'01234567'):
            raise FormatError('invalid tree entry mode %r' % mode)
        name = tree_data[mode_end + 1:z]
        if not name:
            raise FormatError('tree entry at offset %d has no name' % ofs)
        oid = tree_data[z + 1:z + 21]
        if len(oid) != 20:
            raise FormatError('tree entry %r is truncated (%d of 20 hash bytes)'
                              % (name, len(oid)))
        ofs = z + 21
        yield int(mode, 8), name, oid


def tree_entries(tree_data):
    """Return a (mode, name, oid) list for the entries in the git
    tree_data."""
    return list(tree_iter(tree_data))
