
import sys

from mingit import options, version
from mingit.io import byte_stream


optspec = """
mingit version
"""

def main(argv):
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])
    if extra:
        o.fatal('no arguments expected')
    sys.stdout.flush()
    byte_stream(sys.stdout).write(version.version + b'\n')
    return 0
