
import sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.io import byte_stream
from mingit.repo import LocalRepo


optspec = """
mingit cat-file (-p|-t|-s) <hash>
--
p,pretty   print the content of the blob
t,type     print the kind of the object (blob, tree, or commit)
s,size     print the size of the object's content
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if len(extra) != 1:
        o.fatal('must specify exactly one object hash')
    if sum(1 for x in (opt.pretty, opt.type, opt.size) if x) != 1:
        o.fatal('exactly one of -p, -t, or -s is required')
    oidx = argv_bytes(extra[0])

    repo = LocalRepo(path.defaultrepo())
    sys.stdout.flush()
    out = byte_stream(sys.stdout)
    if opt.pretty:
        out.write(repo.cat_file(oidx, pretty=True))
    else:
        obj = repo.cat(oidx)
        if opt.type:
            out.write(obj.kind + b'\n')
        else:
            out.write(b'%d\n' % obj.size)
    return 0
