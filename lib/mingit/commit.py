from binascii import hexlify
from collections import namedtuple
import re

from mingit.git import FormatError


def parse_tz_offset(s):
    """UTC offset in seconds."""
    tz_off = (int(s[1:3]) * 60 * 60) + (int(s[3:5]) * 60)
    if s[0] == b'-'[0]:
        return - tz_off
    return tz_off


def format_tz_offset(tz_offset_sec):
    """Return tz_offset_sec (seconds east of UTC) as b'+hhmm' or b'-hhmm'."""
    offs = abs(tz_offset_sec) // 60
    return b'%s%02d%02d' % (b'-' if tz_offset_sec < 0 else b'+',
                            offs // 60, offs % 60)


def _git_date_str(epoch_sec, tz_offset_sec):
    return b'%d %s' % (epoch_sec, format_tz_offset(tz_offset_sec))


_ident_rx = br'[^\0\n]+'
_tz_rx = br'[-+]\d\d[0-5]\d'
_hex_rx = br'[0-9a-f]{40}'
_commit_rx = re.compile(br'''tree (?P<tree>%s)
(?P<parents>(?:parent %s\n)*)author (?P<author>%s) (?P<asec>\d+) (?P<atz>%s)
committer (?P<committer>%s) (?P<csec>\d+) (?P<ctz>%s)

(?P<message>(?:.|\n)*)\Z''' % (_hex_rx, _hex_rx,
                                _ident_rx, _tz_rx,
                                _ident_rx, _tz_rx))
_parent_hash_rx = re.compile(br'parent (%s)\n' % _hex_rx)

# Note that the author_sec and committer_sec values are (UTC) epoch
# seconds, and the offsets are seconds east of UTC.
CommitInfo = namedtuple('CommitInfo', ['tree', 'parents',
                                       'author', 'author_sec', 'author_offset',
                                       'committer',
                                       'committer_sec', 'committer_offset',
                                       'message'])

def parse_commit(content):
    """Return the CommitInfo for commit content; tree and parents are
    hex (bytes)."""
    commit_match = _commit_rx.match(content)
    if not commit_match:
        raise FormatError('cannot parse commit %r' % content)
    matches = commit_match.groupdict()
    return CommitInfo(tree=matches['tree'],
                      parents=_parent_hash_rx.findall(matches['parents']),
                      author=matches['author'],
                      author_sec=int(matches['asec']),
                      author_offset=parse_tz_offset(matches['atz']),
                      committer=matches['committer'],
                      committer_sec=int(matches['csec']),
                      committer_offset=parse_tz_offset(matches['ctz']),
                      message=matches['message'])


def _check_ident(ident):
    if not ident or b'\n' in ident or b'\0' in ident:
        raise FormatError('invalid commit identity %r' % ident)


def create_commit_blob(tree, parent,
                       author, adate_sec, adate_tz,
                       committer, cdate_sec, cdate_tz,
                       msg):
    """Return commit content for the raw tree and parent (or None)
    oids.  The dates are epoch seconds and the tz values seconds east
    of UTC; nothing here consults the clock or the local timezone."""
    _check_ident(author)
    _check_ident(committer)
    l = [b'tree %s' % hexlify(tree)]
    if parent: l.append(b'parent %s' % hexlify(parent))
    l.append(b'author %s %s' % (author, _git_date_str(adate_sec, adate_tz)))
    l.append(b'committer %s %s' % (committer, _git_date_str(cdate_sec, cdate_tz)))
    l.append(b'')
    l.append(msg if msg.endswith(b'\n') else msg + b'\n')
    return b'\n'.join(l)
