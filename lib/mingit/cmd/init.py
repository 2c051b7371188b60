
from os.path import abspath, join
import sys

from mingit import options, path
from mingit.compat import argv_bytes
from mingit.helpers import mkdirp
from mingit.io import byte_stream, path_msg
from mingit.repo import LocalRepo


optspec = """
[MINGIT_DIR=directory] mingit init [directory]
--
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if len(extra) > 1:
        o.fatal('only the directory positional argument is allowed')
    if extra:
        top = abspath(argv_bytes(extra[0]))
        mkdirp(top)
        repo_dir = join(top, b'.git')
    else:
        repo_dir = path.defaultrepo()
    repo = LocalRepo.create(repo_dir)
    sys.stdout.flush()
    out = byte_stream(sys.stdout)
    out.write(b'Initialized git directory %s\n'
              % path_msg(repo.repo_dir).encode('ascii'))
    return 0
