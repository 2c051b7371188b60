"""Build git trees from a directory on disk.

The walk is depth first and post-order: every blob and subtree is
handed to write(kind, content) -> oid as soon as it's built, before
the tree that refers to it.  Empty directories can't be represented
and are left out.

Files and subdirectories that vanish or can't be read are reported
with add_error() and left out too.  Failing to list dir_path itself
is an error.
"""

import os, stat

from mingit.git import (BLOB, TREE, GIT_MODE_FILE, GIT_MODE_TREE,
                        calc_hash, check_tree_name, tree_encode)
from mingit.helpers import add_error
from mingit.io import debug1, debug2, path_msg


class TreeItem:
    __slots__ = 'name', 'mode', 'kind', 'oid'
    def __init__(self, name, mode, kind, oid):
        assert isinstance(name, bytes), name
        assert isinstance(mode, int), mode
        assert isinstance(oid, bytes), oid
        self.name = name
        self.mode = mode
        self.kind = kind
        self.oid = oid
    def __repr__(self):
        return f'<mingit.tree.TreeItem object at 0x{id(self):x} name={self.name!r}>'
    def __eq__(self, other):
        return isinstance(other, TreeItem) \
            and (self.name, self.mode, self.kind, self.oid) \
            == (other.name, other.mode, other.kind, other.oid)
    def shalist_item(self):
        return self.mode, self.name, self.oid


def _listdir(path):
    return os.listdir(path)


def _read_file(path):
    with open(path, 'rb') as f:
        return f.read()


def _dir_items(dir_path, names, write, exclude, exclude_paths):
    items = []
    for name in names:
        if name in exclude:
            continue
        path = os.path.join(dir_path, name)
        if exclude_paths and os.path.realpath(path) in exclude_paths:
            debug2('skipping repository %s\n' % path_msg(path))
            continue
        try:
            st = os.lstat(path)
        except OSError as e:
            add_error(e)
            continue
        if stat.S_ISDIR(st.st_mode):
            try:
                sub_names = _listdir(path)
            except OSError as e:
                add_error(e)
                continue
            sub = _dir_items(path, sub_names, write, exclude, exclude_paths)
            if not sub:
                debug1('skipping empty directory %s\n' % path_msg(path))
                continue
            check_tree_name(name)
            oid = write(TREE, tree_encode(x.shalist_item() for x in sub))
            items.append(TreeItem(name, GIT_MODE_TREE, TREE, oid))
        elif stat.S_ISREG(st.st_mode):
            check_tree_name(name)
            try:
                content = _read_file(path)
            except OSError as e:
                add_error(e)
                continue
            oid = write(BLOB, content)
            items.append(TreeItem(name, GIT_MODE_FILE, BLOB, oid))
        else:
            debug1('skipping %s (not a regular file or directory)\n'
                   % path_msg(path))
    items.sort(key=lambda x: x.name)
    return items


def tree_items(dir_path, write, exclude=(b'.git',), exclude_paths=()):
    """Return the sorted TreeItems for dir_path, writing all of the
    objects below it (but not the tree for dir_path itself)."""
    dir_path = os.fsencode(dir_path)
    exclude_paths = frozenset(os.path.realpath(os.fsencode(p))
                              for p in exclude_paths)
    return _dir_items(dir_path, _listdir(dir_path), write, frozenset(exclude),
                      exclude_paths)


def build_tree(dir_path, write, exclude=(b'.git',), exclude_paths=()):
    """Write the tree for dir_path (and everything below it) via
    write(kind, content) and return the tree's oid.  Entries named in
    exclude are skipped at every level, as are the paths in
    exclude_paths.  dir_path itself is always written, even when it
    has no entries (as the empty tree)."""
    items = tree_items(dir_path, write, exclude, exclude_paths)
    return write(TREE, tree_encode(x.shalist_item() for x in items))


def hash_tree(dir_path, exclude=(b'.git',), exclude_paths=()):
    """Return the oid build_tree() would return, without writing anything."""
    return build_tree(dir_path, calc_hash, exclude, exclude_paths)
