
import sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.helpers import parse_date_or_fatal
from mingit.io import byte_stream
from mingit.repo import LocalRepo


optspec = """
mingit commit-tree <tree-hash> [-p parent-hash] -m message
--
p,parent=   hash of the parent commit
m,message=  commit message
d,date=     date for the commit (seconds since the epoch)
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if len(extra) != 1:
        o.fatal('must specify exactly one tree hash')
    if opt.message is None:
        o.fatal('a commit message (-m) is required')
    tree = argv_bytes(extra[0])
    parent = argv_bytes(str(opt.parent)) if opt.parent else None
    message = argv_bytes(str(opt.message))
    date = parse_date_or_fatal(str(opt.date), o.fatal) if opt.date else None

    repo = LocalRepo(path.defaultrepo())
    oidx = repo.commit_tree(tree, parent, message, date=date)
    sys.stdout.flush()
    byte_stream(sys.stdout).write(oidx + b'\n')
    return 0
