from binascii import hexlify
import zlib

from wvpytest import *

from mingit import git
from mingit.git import (BLOB, COMMIT, TREE,
                        CorruptObject, FormatError, InvalidHash,
                        GIT_MODE_FILE, GIT_MODE_TREE)


hello_oidx = b'ce013625030ba8dba906f756967f9e9ca394464a'
empty_blob_oidx = b'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_calc_hash():
    WVPASSEQ(hexlify(git.calc_hash(BLOB, b'hello\n')), hello_oidx)
    WVPASSEQ(hexlify(git.calc_hash(BLOB, b'')), empty_blob_oidx)
    WVPASSEQ(hexlify(git.calc_hash(TREE, b'')), git.EMPTY_TREE_OIDX)
    WVPASSEQ(git.calc_hash(BLOB, b'hello\n'),
             git.calc_digest(b'blob 6\0hello\n'))
    WVPASSEQ(git.calc_hash(BLOB, b'x'), git.calc_hash(BLOB, b'x'))
    # The kind is part of the hashed envelope
    WVPASSNE(git.calc_hash(BLOB, b'x'), git.calc_hash(COMMIT, b'x'))
    WVEXCEPT(FormatError, git.calc_hash, b'tag', b'x')


def test_hex_conversion():
    oid = git.oid_from_hex(hello_oidx)
    WVPASSEQ(len(oid), 20)
    WVPASSEQ(git.oid_to_hex(oid), hello_oidx)
    WVPASSEQ(git.oid_from_hex(hello_oidx.upper()), oid)
    WVPASSEQ(git.oid_from_hex(hello_oidx.decode('ascii')), oid)
    for bad in (b'', hello_oidx[:-1], hello_oidx + b'0',
                b'g' + hello_oidx[1:], hello_oidx[:-1] + b'\n', 'caf\xe9'):
        WVEXCEPT(InvalidHash, git.oid_from_hex, bad)
    WVEXCEPT(ValueError, git.oid_from_hex, b'xyz')
    WVEXCEPT(InvalidHash, git.oid_to_hex, b'\0' * 19)


def test_object_path():
    oid = git.oid_from_hex(hello_oidx)
    WVPASSEQ(git.object_path(b'/r/.git', oid),
             b'/r/.git/objects/ce/013625030ba8dba906f756967f9e9ca394464a')


def test_compression():
    data = b'some content\n' * 100
    WVPASSEQ(git.decompress(git.compress(data)), data)
    WVPASSEQ(git.decompress(git.compress(data, 9)), data)
    WVPASSEQ(zlib.decompress(git.compress(data)), data)
    WVEXCEPT(ValueError, git.compress, data, 10)
    WVEXCEPT(ValueError, git.compress, data, -2)
    WVEXCEPT(CorruptObject, git.decompress, b'not zlib data')
    WVEXCEPT(CorruptObject, git.decompress, git.compress(data)[:-4])
    WVPASSEQ(git.decompress_prefix(git.compress(data), 5), b'some ')


def test_object_envelope():
    WVPASSEQ(git.encode_object(BLOB, b'hello\n'), b'blob 6\0hello\n')
    WVPASSEQ(git.encode_object(TREE, b''), b'tree 0\0')
    obj = git.decode_object(b'blob 6\0hello\n')
    WVPASSEQ(obj, git.GitObject(BLOB, 6, b'hello\n'))
    WVPASSEQ(git.decode_object(b'commit 0\0'), (COMMIT, 0, b''))
    # Content may contain the delimiters
    WVPASSEQ(git.decode_object(b'blob 3\0 \0 ').content, b' \0 ')
    WVPASSEQ(git.decode_header(b'tree 123\0...'), (TREE, 123, 9))


def test_object_envelope_errors():
    WVEXCEPT(FormatError, git.decode_object, b'blob6\0hello\n')
    WVEXCEPT(FormatError, git.decode_object, b'blob 6hello\n')
    WVEXCEPT(FormatError, git.decode_object, b'blub 6\0hello\n')
    WVEXCEPT(FormatError, git.decode_object, b'blob x\0hello\n')
    WVEXCEPT(FormatError, git.decode_object, b'blob \0hello\n')
    WVEXCEPT(FormatError, git.encode_object, b'tag', b'')
    WVEXCEPT(CorruptObject, git.decode_object, b'blob 7\0hello\n')
    WVEXCEPT(CorruptObject, git.decode_object, b'blob 5\0hello\n')


def test_tree_encode():
    a = git.calc_hash(BLOB, b'a')
    b = git.calc_hash(BLOB, b'b')
    sub = git.calc_hash(TREE, b'')
    tree = git.tree_encode([(GIT_MODE_FILE, b'b', b),
                            (GIT_MODE_TREE, b'sub', sub),
                            (GIT_MODE_FILE, b'a', a)])
    WVPASSEQ(tree, b'100644 a\0' + a + b'100644 b\0' + b + b'40000 sub\0' + sub)
    WVPASSEQ(git.tree_entries(tree),
             [(GIT_MODE_FILE, b'a', a),
              (GIT_MODE_FILE, b'b', b),
              (GIT_MODE_TREE, b'sub', sub)])
    WVPASSEQ(git.tree_encode([]), b'')
    WVPASSEQ(git.tree_entries(b''), [])


def test_tree_order_is_by_name():
    oid = git.calc_hash(BLOB, b'')
    tree = git.tree_encode([(GIT_MODE_TREE, b'foo', oid),
                            (GIT_MODE_FILE, b'foo.c', oid),
                            (GIT_MODE_FILE, b'foo-bar', oid)])
    # git would put foo after foo.c
    WVPASSEQ([name for _, name, _ in git.tree_iter(tree)],
             [b'foo', b'foo-bar', b'foo.c'])


def test_tree_names():
    oid = git.calc_hash(BLOB, b'')
    for bad in (b'', b'a b', b'a\0b', b'.', b'..', b'a/b'):
        WVEXCEPT(FormatError, git.tree_encode, [(GIT_MODE_FILE, bad, oid)])
    WVEXCEPT(FormatError, git.tree_encode, [(GIT_MODE_FILE, b'x', oid),
                                            (GIT_MODE_FILE, b'x', oid)])
    WVEXCEPT(InvalidHash, git.tree_encode, [(GIT_MODE_FILE, b'x', oid[:-1])])
    # Anything else is fine, including high bytes and dot files
    tree = git.tree_encode([(GIT_MODE_FILE, b'\xff\x01', oid),
                            (GIT_MODE_FILE, b'.hidden', oid)])
    WVPASSEQ([name for _, name, _ in git.tree_iter(tree)],
             [b'.hidden', b'\xff\x01'])


def test_tree_decode_errors():
    oid = git.calc_hash(BLOB, b'')
    good = b'100644 a\0' + oid
    WVPASSEQ(len(git.tree_entries(good)), 1)
    for i in range(1, 20):
        WVEXCEPT(FormatError, git.tree_entries, good[:-i])
    WVEXCEPT(FormatError, git.tree_entries, good + b'100644 b\0' + oid[:19])
    WVEXCEPT(FormatError, git.tree_entries, good + b'100644 b')
    WVEXCEPT(FormatError, git.tree_entries, good + b'100644')
    WVEXCEPT(FormatError, git.tree_entries, b'100x44 a\0' + oid)
    WVEXCEPT(FormatError, git.tree_entries, b' a\0' + oid)
    WVEXCEPT(FormatError, git.tree_entries, b'100644 \0' + oid)

