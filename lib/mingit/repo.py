"""Local object store.

A LocalRepo reads and writes git loose objects under an explicit
repository directory (usually some work tree's .git).
"""

from binascii import hexlify
import os, stat, tempfile, time

from mingit import git, tree
from mingit.commit import create_commit_blob
from mingit.compat import environ
from mingit.config import DEFAULT_CONFIG, RepoConfig
from mingit.git import (BLOB, COMMIT, TREE,
                        GitError, MissingObject, TreeEntry,
                        UnexpectedKind,
                        calc_hash, compress, decode_header, decode_object,
                        decompress, decompress_prefix, object_path,
                        oid_from_hex, oid_to_hex, tree_iter)
from mingit.helpers import (hostname, mkdirp, unlink, username, userfullname,
                            utc_offset)
from mingit.io import debug1, debug2, path_msg


_ident_env = {
    b'author': (b'GIT_AUTHOR_NAME', b'GIT_AUTHOR_EMAIL'),
    b'committer': (b'GIT_COMMITTER_NAME', b'GIT_COMMITTER_EMAIL'),
}

# Enough for "commit <20 digits>\0"
_max_header_len = 32


class LocalRepo:
    def __init__(self, repo_dir, compression_level=None):
        self.repo_dir = os.path.realpath(os.fsencode(repo_dir))
        objects = os.path.join(self.repo_dir, b'objects')
        if not os.path.isdir(objects):
            raise GitError('%s is not a repository (no objects directory)'
                           % path_msg(self.repo_dir))
        self.config = RepoConfig(self.repo_dir)
        if compression_level is None:
            compression_level = self.config_get(b'core.compression',
                                                opttype='int')
        self.compression_level = 1 if compression_level is None \
            else compression_level
        if self.compression_level not in range(-1, 10):
            raise GitError('invalid compression level %r'
                           % self.compression_level)
        self._obj_count = 0

    def __enter__(self): return self
    def __exit__(self, type, value, traceback): pass

    def object_count(self):
        """Return the number of objects this instance has written."""
        return self._obj_count

    @classmethod
    def create(cls, repo_dir):
        """Create (or reinitialize) the repository at repo_dir and return
        a LocalRepo for it."""
        repo_dir = os.path.abspath(os.fsencode(repo_dir))
        parent = os.path.dirname(repo_dir)
        if parent and not os.path.isdir(parent):
            raise GitError('parent directory %s does not exist'
                           % path_msg(parent))
        if os.path.exists(repo_dir) and not os.path.isdir(repo_dir):
            raise GitError('%s exists but is not a directory'
                           % path_msg(repo_dir))
        for sub in (b'objects', b'refs/heads', b'refs/tags'):
            mkdirp(os.path.join(repo_dir, sub))
        for name, content in ((b'HEAD', b'ref: refs/heads/main\n'),
                              (b'config', DEFAULT_CONFIG)):
            path = os.path.join(repo_dir, name)
            if not os.path.exists(path):
                with open(path, 'wb') as f:
                    f.write(content)
        return cls(repo_dir)

    def config_get(self, name, *, opttype=None):
        return self.config.get(name, opttype=opttype)

    def object_path(self, oid):
        return object_path(self.repo_dir, oid)

    def exists(self, oid):
        return os.path.exists(self.object_path(oid))

    def write(self, kind, content):
        """Write the object if it isn't already in the repository and
        return its oid."""
        oid = calc_hash(kind, content)
        path = self.object_path(oid)
        if os.path.exists(path):
            debug2('%s %s already exists\n' % (kind.decode('ascii'),
                                               hexlify(oid).decode('ascii')))
            return oid
        data = compress(git.encode_object(kind, content),
                        self.compression_level)
        objdir = os.path.dirname(path)
        mkdirp(objdir)
        fd, tmp = tempfile.mkstemp(prefix=b'tmp_obj_', dir=objdir)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.chmod(tmp, stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
            os.rename(tmp, path)
        except BaseException:
            unlink(tmp)
            raise
        self._obj_count += 1
        debug1('wrote %s %s\n' % (kind.decode('ascii'),
                                  hexlify(oid).decode('ascii')))
        return oid

    def _read_raw(self, oid, size=None):
        path = self.object_path(oid)
        try:
            with open(path, 'rb') as f:
                return f.read() if size is None else f.read(size)
        except FileNotFoundError:
            raise MissingObject(oid) from None

    def read(self, oid):
        """Return the GitObject for oid."""
        try:
            obj = decode_object(decompress(self._read_raw(oid)))
        except git.CorruptObject as ex:
            raise git.CorruptObject('%s: %s' % (path_msg(self.object_path(oid)),
                                                ex)) from ex
        if calc_hash(obj.kind, obj.content) != oid:
            raise git.CorruptObject('%s: content does not match its hash'
                                    % path_msg(self.object_path(oid)))
        return obj

    def object_kind(self, oid):
        """Return the kind of the object, reading only its header."""
        # The header always decompresses from the first 4096 bytes
        head = decompress_prefix(self._read_raw(oid, 4096), _max_header_len)
        kind, _, _ = decode_header(head)
        return kind

    def cat(self, oidx):
        """Return the GitObject for the hex oidx."""
        return self.read(oid_from_hex(oidx))

    def cat_file(self, oidx, pretty=True):
        """Return the content of the object named by oidx.  When pretty
        is true, the object must be a blob."""
        oid = oid_from_hex(oidx)
        obj = self.read(oid)
        if pretty and obj.kind != BLOB:
            raise UnexpectedKind(oid, obj.kind, BLOB)
        return obj.content

    def hash_object(self, path, write=False):
        """Return the hex oid of the blob for the file at path, writing
        the blob to the repository when write is true."""
        with open(path, 'rb') as f:
            content = f.read()
        if write:
            return oid_to_hex(self.write(BLOB, content))
        return oid_to_hex(calc_hash(BLOB, content))

    def _expect(self, oid, kind):
        actual = self.object_kind(oid)
        if actual != kind:
            raise UnexpectedKind(oid, actual, kind)

    def ls_tree(self, oidx, name_only=False):
        """Return the TreeEntry list (or just the names when name_only)
        for the tree named by oidx, in tree order."""
        oid = oid_from_hex(oidx)
        obj = self.read(oid)
        if obj.kind != TREE:
            raise UnexpectedKind(oid, obj.kind, TREE)
        if name_only:
            return [name for _, name, _ in tree_iter(obj.content)]
        return [TreeEntry(mode, self.object_kind(ent_oid),
                          oid_to_hex(ent_oid), name)
                for mode, name, ent_oid in tree_iter(obj.content)]

    def write_tree(self, root_path):
        """Write the tree for the directory root_path, skipping .git
        entries and this repository itself, and return its hex oid."""
        oid = tree.build_tree(root_path, self.write,
                              exclude_paths=(self.repo_dir,))
        return oid_to_hex(oid)

    def identity(self, role):
        """Return b'name <email>' for role (b'author' or b'committer')."""
        name_var, email_var = _ident_env[role]
        name = environ.get(name_var) or self.config_get(b'user.name') \
            or userfullname()
        email = environ.get(email_var) or self.config_get(b'user.email') \
            or b'%s@%s' % (username(), hostname())
        return b'%s <%s>' % (name, email)

    def commit_tree(self, tree_oidx, parent_oidx, message,
                    author=None, committer=None, date=None, tz=None):
        """Write a commit for the tree (and optional parent commit) and
        return its hex oid.  date defaults to now, and tz to the local
        UTC offset (in seconds) at that date."""
        tree_oid = oid_from_hex(tree_oidx)
        self._expect(tree_oid, TREE)
        parent_oid = None
        if parent_oidx:
            parent_oid = oid_from_hex(parent_oidx)
            self._expect(parent_oid, COMMIT)
        if date is None:
            date = int(time.time())
        if tz is None:
            tz = utc_offset(date)
        author = author or self.identity(b'author')
        committer = committer or self.identity(b'committer')
        content = create_commit_blob(tree_oid, parent_oid,
                                     author, date, tz,
                                     committer, date, tz,
                                     message)
        return oid_to_hex(self.write(COMMIT, content))
