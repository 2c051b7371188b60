"""Repository configuration.

The repository config file (<repo>/config) uses the same ini layout as
git's:

  [core]
      compression = 1
  [user]
      name = Someone
      email = someone@example.com

Values are looked up as "section.name"; a few of them can be
overridden from the environment (see ENV_OVERRIDES).
"""

import errno, os

from mingit.compat import environ
from mingit.io import log, path_msg


class ConfigError(Exception):
    pass


ENV_OVERRIDES = {
    b'core.compression': b'MINGIT_COMPRESSION',
}

DEFAULT_CONFIG = b'''[core]
\trepositoryformatversion = 0
\tbare = false
'''


class Ini:
    """Read-only view of an ini file, as {section: {name: value}}.
    Section and key names are case-insensitive, values are bytes."""
    def __init__(self):
        self.sections = {b'': {}}

    def read(self, lines, source=b'<config>'):
        cursection = self.sections[b'']
        for lineno, _line in enumerate(lines, 1):
            line = _line.strip()
            if not line or line.startswith((b'#', b';')):
                continue
            if line.startswith(b'[') and line.endswith(b']'):
                name = line[1:-1].strip().lower()
                cursection = self.sections.setdefault(name, {})
                continue
            l = line.split(b'=', 1)
            if len(l) != 2:
                log('warning: %s:%d: invalid config line: %r\n'
                    % (path_msg(source), lineno, line))
                continue
            cursection[l[0].strip().lower()] = l[1].strip()
        return self

    def get(self, section, name, defval=None):
        return self.sections.get(section.lower(), {}).get(name.lower(), defval)


def read_config(path):
    """Return an Ini for the file at path, empty if the file doesn't exist."""
    ini = Ini()
    try:
        with open(path, 'rb') as f:
            ini.read(f, source=path)
    except OSError as e:
        if e.errno != errno.ENOENT:
            raise
    return ini


class RepoConfig:
    def __init__(self, repo_dir):
        self.path = os.path.join(repo_dir, b'config')
        self._ini = read_config(self.path)

    def get(self, option, *, opttype=None):
        """Return the value of option (b'section.name') as bytes, or
        as an int when opttype is 'int', or None when it's not set."""
        assert opttype in ('int', None)
        env = ENV_OVERRIDES.get(option)
        val = environ.get(env) if env else None
        if val is None:
            section, _, name = option.rpartition(b'.')
            val = self._ini.get(section, name)
        if val is None or opttype is None:
            return val
        try:
            return int(val)
        except ValueError:
            raise ConfigError('%s: %s is not an integer: %r'
                              % (path_msg(self.path), option.decode('ascii'),
                                 val))
