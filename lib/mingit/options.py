# Copyright 2010-2012 Avery Pennarun and options.py contributors.
# All rights reserved.
#
# (This license applies to this file but not necessarily the other files in
# this package.)
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are
# met:
#
#    1. Redistributions of source code must retain the above copyright
#       notice, this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in
#       the documentation and/or other materials provided with the
#       distribution.
#
# THIS SOFTWARE IS PROVIDED BY AVERY PENNARUN AND CONTRIBUTORS ``AS
# IS'' AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL
# <COPYRIGHT HOLDER> OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT,
# INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES
# (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION)
# HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT,
# STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED
# OF THE POSSIBILITY OF SUCH DAMAGE.
#
"""Command-line options parser driven by an option spec string.

An option spec has a synopsis part and an options part, separated by a
line containing only "--".  Each synopsis line is printed as a usage
line.  Each option line starts with comma separated flags (a one
character flag and/or a long flag), followed by whitespace and a
description.  A trailing "=" on the flags means the option takes a
value, which is converted to an int when it looks like one.  Text in
square brackets at the end of the description is the default value.
A line beginning with a space starts a new group of options; its text
is printed as a heading.

The first long flag (or the short flag, if there is no long one) is
the key under which the value is found in the parsed OptDict.  Any
flag may be negated on the command line with a "no-" prefix.
"""

import getopt, os, re, struct, sys, textwrap

try:
    import fcntl
except ImportError:
    fcntl = None

try:
    import termios
except ImportError:
    termios = None


def _strip_negation(k, v):
    if k.startswith('no-') or k.startswith('no_'):
        return k[3:], not v
    return k, v


class OptDict:
    """Dictionary that exposes keys as attributes, honoring aliases
    and "no-" negation."""
    def __init__(self, aliases):
        self._opts = {}
        self._aliases = aliases

    def _unalias(self, k):
        k, reinvert = _strip_negation(k, False)
        k, invert = self._aliases[k]
        return k, invert ^ reinvert

    def __setitem__(self, k, v):
        k, invert = self._unalias(k)
        self._opts[k] = (not v) if invert else v

    def __getitem__(self, k):
        k, invert = self._unalias(k)
        v = self._opts[k]
        return (not v) if invert else v

    def __getattr__(self, k):
        return self[k]


def _default_onabort(msg):
    sys.exit(97)


def _intify(v):
    try:
        vv = int(v or '')
        if str(vv) == v:
            return vv
    except ValueError:
        pass
    return v


if fcntl and termios:
    def _tty_width():
        forced = os.environ.get('MINGIT_TTY_WIDTH', None)
        if forced:
            return int(forced)
        s = struct.pack("HHHH", 0, 0, 0, 0)
        try:
            s = fcntl.ioctl(sys.stderr.fileno(), termios.TIOCGWINSZ, s)
        except (IOError, ValueError):
            return 70
        ysize, xsize, ypix, xpix = struct.unpack('HHHH', s)
        return xsize or 70
else:
    def _tty_width():
        return 70


class Options:
    """Option parser built from an option spec (see the module docstring).

    On any usage error, the usage text is printed to stderr and
    onabort(msg) is called; by default that exits with status 97.
    """
    def __init__(self, optspec, optfunc=getopt.gnu_getopt,
                 onabort=_default_onabort):
        self.optspec = optspec
        self._onabort = onabort
        self.optfunc = optfunc
        self._aliases = {}
        self._shortopts = 'h?'
        self._longopts = ['help', 'usage']
        self._hasparms = {}
        self._defaults = {}
        self._usagestr = self._gen_usage()

    def _add_option(self, flags, has_parm, defval):
        flagl = flags.split(',')
        main, invert_main = _strip_negation(flagl[0], False)
        self._defaults[main] = (not defval) if invert_main else defval
        nice = []
        for raw in flagl:
            f, invert = _strip_negation(raw, False)
            self._aliases[f] = (main, invert_main ^ invert)
            self._hasparms[f] = has_parm
            if len(f) == 1:
                self._shortopts += f + (':' if has_parm else '')
                nice.append('-' + f)
            else:
                self._aliases[re.sub(r'\W', '_', f)] = \
                    (main, invert_main ^ invert)
                self._longopts.append(f + ('=' if has_parm else ''))
                self._longopts.append('no-' + f)
                nice.append('--' + raw)
        return ', '.join(nice) + (' ...' if has_parm else '')

    def _gen_usage(self):
        lines = self.optspec.strip().split('\n')
        try:
            sep = lines.index('--')
        except ValueError:
            sep = len(lines)
        out = []
        for i, l in enumerate(lines[:sep]):
            out.append('%s: %s\n' % ('usage' if i == 0 else '   or', l))
        out.append('\n')
        last_was_option = False
        for l in lines[sep + 1:]:
            if l.startswith(' '):
                out.append('%s%s\n' % ('\n' if last_was_option else '',
                                       l.lstrip()))
                last_was_option = False
            elif l:
                flags, extra = (l + ' ').split(' ', 1)
                extra = extra.strip()
                has_parm = flags.endswith('=')
                if has_parm:
                    flags = flags[:-1]
                g = re.search(r'\[([^\]]*)\]$', extra)
                defval = _intify(g.group(1)) if g else None
                flags_nice = self._add_option(flags, has_parm, defval)
                prefix = '    %-20s  ' % flags_nice
                out.append('\n'.join(textwrap.wrap(extra,
                                                   width=_tty_width(),
                                                   initial_indent=prefix,
                                                   subsequent_indent=' '*28))
                           + '\n')
                last_was_option = True
            else:
                out.append('\n')
                last_was_option = False
        return ''.join(out).rstrip() + '\n'

    def usage_text(self):
        return self._usagestr

    def usage(self, msg=""):
        """Print usage string to stderr and abort."""
        sys.stderr.write(self._usagestr)
        if msg:
            sys.stderr.write(msg)
        e = self._onabort and self._onabort(msg) or None
        if e:
            raise e

    def fatal(self, msg):
        """Print an error message to stderr and abort with usage string."""
        msg = '\nerror: %s\n' % msg
        return self.usage(msg)

    def parse(self, args):
        """Parse a list of arguments and return (options, flags, extra).

        In the returned tuple, "options" is an OptDict with known options,
        "flags" is a list of option flags that were used on the command-line,
        and "extra" is a list of positional arguments.
        """
        try:
            (flags, extra) = self.optfunc(args, self._shortopts, self._longopts)
        except getopt.GetoptError as e:
            self.fatal(e)
            raise SystemExit(97)

        opt = OptDict(aliases=self._aliases)
        for k, v in self._defaults.items():
            opt[k] = v

        for (k, v) in flags:
            k = k.lstrip('-')
            if k in ('h', '?', 'help', 'usage'):
                self.usage()
            main, invert = opt._unalias(k)
            if not self._hasparms[main]:
                assert v == ''
                v = (opt._opts.get(main) or 0) + 1
            else:
                v = _intify(v)
            opt[k] = v
        return (opt, flags, extra)

    def parse_bytes(self, args):
        args = [x.decode(errors='surrogateescape') for x in args]
        return self.parse(args)
