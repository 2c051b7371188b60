
import sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.git import BLOB, calc_hash, oid_to_hex
from mingit.io import byte_stream
from mingit.repo import LocalRepo


optspec = """
mingit hash-object [-w] <file...>
--
w,write    write the blob into the repository
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if not extra:
        o.fatal('no files specified')
    paths = [argv_bytes(x) for x in extra]

    sys.stdout.flush()
    out = byte_stream(sys.stdout)
    if opt.write:
        repo = LocalRepo(path.defaultrepo())
        for p in paths:
            out.write(repo.hash_object(p, write=True) + b'\n')
    else:
        # No repository is needed just to compute the hash
        for p in paths:
            with open(p, 'rb') as f:
                out.write(oid_to_hex(calc_hash(BLOB, f.read())) + b'\n')
    return 0
