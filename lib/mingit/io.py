
from os import fsencode
import os, sys


def byte_stream(file):
    return file.buffer


def log(s):
    """Print a log message to stderr."""
    sys.stdout.flush()
    out = byte_stream(sys.stderr)
    out.write(s if isinstance(s, bytes) else s.encode(errors='backslashreplace'))
    out.flush()


buglvl = int(os.environ.get('MINGIT_DEBUG', 0))

def debug1(s):
    if buglvl >= 1:
        log(s)

def debug2(s):
    if buglvl >= 2:
        log(s)


def _make_enc_sh_map():
    m = [None] * 256
    for i in range(32): m[i] = br'\x%02x' % i
    m[7] = br'\a'
    m[8] = br'\b'
    m[9] = br'\t'
    m[10] = br'\n'
    m[11] = br'\v'
    m[12] = br'\f'
    m[13] = br'\r'
    m[27] = br'\e' # ESC
    m[39] = br"\'"
    m[92] = br'\\'
    for i in range(127, 256): m[i] = br'\x%02x' % i
    return m

_enc_sh_map = _make_enc_sh_map()


def enc_dsq(val):
    """Encode val (bytes) in POSIX $'...' (dollar-single-quote)
    format, escaping control characters, quotes, backslashes and any
    byte with the high bit set.

    """
    result = [b"$'"]
    for b in val:
        enc = _enc_sh_map[b]
        result.append(enc if enc else bytes((b,)))
    result.append(b"'")
    return b''.join(result)


def enc_sh(val):
    """Minimally POSIX quote val (bytes) as a single line. Use no
    quotes if possible, single quotes if val doesn't contain single
    quotes or control characters, otherwise dollar-single-quote.  The
    result is always ASCII.

    """
    assert isinstance(val, bytes), val
    if val == b'':
        return b"''"
    need_sq = False
    for c in val:
        if c < 32 or c >= 127 or c == b"'"[0]:
            return enc_dsq(val)
        if c in b'|&;<>()$`\\" \t*?[]^!#~=%{,}':
            need_sq = True
    if need_sq:
        return b"'%s'" % val
    return val


def path_msg(x):
    """Return a printable (str) representation of a path."""
    if isinstance(x, str):
        x = fsencode(x)
    return enc_sh(x).decode('ascii')
