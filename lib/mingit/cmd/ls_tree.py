
import sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.io import byte_stream
from mingit.repo import LocalRepo


optspec = """
mingit ls-tree [--name-only] <tree-hash>
--
name-only  list only the names of the entries
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if len(extra) != 1:
        o.fatal('must specify exactly one tree hash')

    repo = LocalRepo(path.defaultrepo())
    result = repo.ls_tree(argv_bytes(extra[0]), name_only=opt.name_only)
    sys.stdout.flush()
    out = byte_stream(sys.stdout)
    if opt.name_only:
        for name in result:
            out.write(name + b'\n')
    else:
        for ent in result:
            out.write(b'%06o %s %s\t%s\n'
                      % (ent.mode, ent.kind, ent.oidx, ent.name))
    return 0
