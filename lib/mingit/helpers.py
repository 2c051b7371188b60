"""Helper functions and classes for mingit."""

import errno, hashlib, os, pwd, socket, sys, time

from mingit.io import log
# This function should really be in helpers, not in mingit.options.  But we
# want options.py to be standalone so people can include it in other projects.
from mingit.options import _tty_width as tty_width


EXIT_FAILURE = 2


Sha1 = hashlib.sha1


class finalized:
    def __init__(self, what_or_how, how=None):
        if how is None:
            self.enter_result = None
            self.finalize = what_or_how
        else:
            self.enter_result = what_or_how
            self.finalize = how
    def __enter__(self):
        return self.enter_result
    def __exit__(self, exc_type, exc_value, traceback):
        self.finalize(self.enter_result)


def mkdirp(d, mode=None):
    """Recursively create directories on path 'd'.

    Unlike os.makedirs(), it doesn't raise an exception if the last element of
    the path already exists.
    """
    try:
        if mode:
            os.makedirs(d, mode)
        else:
            os.makedirs(d)
    except OSError as e:
        if e.errno == errno.EEXIST and os.path.isdir(d):
            pass
        else:
            raise


def unlink(f):
    """Delete a file at path 'f' if it currently exists.

    Unlike os.unlink(), does not throw an exception if the file didn't already
    exist.
    """
    try:
        os.unlink(f)
    except OSError as e:
        if e.errno != errno.ENOENT:
            raise


saved_errors = []
def add_error(e):
    """Append an error message to the list of saved errors.

    Once processing is able to stop and output the errors, the saved errors are
    accessible in the module variable helpers.saved_errors.
    """
    saved_errors.append(e)
    log('%-70s\n' % e)

def clear_errors():
    global saved_errors
    saved_errors = []


def die_if_errors(msg=None, status=EXIT_FAILURE):
    if saved_errors:
        if not msg:
            msg = 'warning: %d errors encountered\n' % len(saved_errors)
        log(msg)
        sys.exit(status)


def handle_ctrl_c():
    """Replace the default exception handler for KeyboardInterrupt (Ctrl-C).

    The new exception handler will make sure that mingit will exit
    without an ugly stacktrace when Ctrl-C is hit.
    """
    oldhook = sys.excepthook
    def newhook(exctype, value, traceback):
        if exctype == KeyboardInterrupt:
            log('\nInterrupted.\n')
        else:
            oldhook(exctype, value, traceback)
    sys.excepthook = newhook


def columnate(l, prefix):
    """Format elements of 'l' in columns with 'prefix' leading each line.

    The number of columns is determined automatically based on the string
    lengths.
    """
    if not l:
        return ''
    l = l[:]
    clen = max(len(s) for s in l)
    ncols = (tty_width() - len(prefix)) // (clen + 2)
    if ncols <= 1:
        ncols = 1
        clen = 0
    cols = []
    while len(l) % ncols:
        l.append('')
    rows = len(l) // ncols
    for s in range(0, len(l), rows):
        cols.append(l[s:s+rows])
    out = []
    for row in zip(*cols):
        out.append(prefix + ''.join(('%-*s' % (clen+2, s)) for s in row) + '\n')
    return ''.join(out)


def parse_date_or_fatal(str, fatal):
    """Parses the given date or calls Option.fatal().
    For now we expect a string that contains an integer number of
    seconds since the epoch."""
    try:
        date = int(str)
    except ValueError as e:
        raise fatal('invalid date format (should be an integer): %r' % e)
    else:
        return date


def utc_offset(t):
    """Return the local offset from UTC in seconds for time t.  If the
    offset does not represent an integer number of minutes, the
    fractional component will be truncated."""
    off = time.localtime(t).tm_gmtoff
    return (abs(off) // 60 * 60) * (-1 if off < 0 else 1)


_hostname = None
def hostname():
    """Get the FQDN of this machine."""
    global _hostname
    if not _hostname:
        _hostname = socket.getfqdn().encode('ascii', 'replace')
    return _hostname


_username = None
def username():
    """Get the user's login name."""
    global _username
    if not _username:
        uid = os.getuid()
        try:
            _username = os.fsencode(pwd.getpwuid(uid).pw_name)
        except KeyError:
            _username = None
        _username = _username or b'user%d' % uid
    return _username


_userfullname = None
def userfullname():
    """Get the user's full name."""
    global _userfullname
    if not _userfullname:
        uid = os.getuid()
        try:
            entry = pwd.getpwuid(uid)
        except KeyError:
            entry = None
        if entry:
            gecos = os.fsencode(entry.pw_gecos)
            _userfullname = gecos.split(b',')[0] or os.fsencode(entry.pw_name)
        if not _userfullname:
            _userfullname = b'user%d' % uid
    return _userfullname
