
import os, sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.io import byte_stream
from mingit.repo import LocalRepo


optspec = """
mingit write-tree [-C directory]
--
C,directory=  store this directory instead of the current one
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if extra:
        o.fatal('no positional arguments expected')
    root = argv_bytes(str(opt.directory)) if opt.directory else os.getcwdb()

    repo = LocalRepo(path.defaultrepo())
    oidx = repo.write_tree(root)
    sys.stdout.flush()
    byte_stream(sys.stdout).write(oidx + b'\n')
    return 0
