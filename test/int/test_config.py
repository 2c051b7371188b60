
from wvpytest import *

from mingit.compat import environ
from mingit.config import ConfigError, Ini, RepoConfig, read_config


def test_ini(capsysbinary):
    ini = Ini().read([b'# comment\n',
                      b'top = level\n',
                      b'[Core]\n',
                      b'\tCompression = 3\n',
                      b'; another comment\n',
                      b'\n',
                      b'[user]\n',
                      b'  name = Some One  \n',
                      b'email=x@y=z\n',
                      b'not a setting\n'])
    WVPASSEQ(ini.get(b'', b'top'), b'level')
    WVPASSEQ(ini.get(b'core', b'compression'), b'3')
    WVPASSEQ(ini.get(b'CORE', b'COMPRESSION'), b'3')
    WVPASSEQ(ini.get(b'user', b'name'), b'Some One')
    WVPASSEQ(ini.get(b'user', b'email'), b'x@y=z')
    WVPASSEQ(ini.get(b'user', b'missing', b'dflt'), b'dflt')
    WVPASSEQ(ini.get(b'nosuch', b'name'), None)
    WVPASS(b'invalid config line' in capsysbinary.readouterr().err)


def test_repo_config(tmpdir):
    WVPASSEQ(read_config(tmpdir + b'/config').sections, {b'': {}})
    with open(tmpdir + b'/config', 'wb') as f:
        f.write(b'[core]\n\tcompression = 4\n[user]\n\tname = N\n')
    config = RepoConfig(tmpdir)
    WVPASSEQ(config.get(b'core.compression'), b'4')
    WVPASSEQ(config.get(b'core.compression', opttype='int'), 4)
    WVPASSEQ(config.get(b'user.name', opttype=None), b'N')
    WVPASSEQ(config.get(b'user.email'), None)
    WVPASSEQ(config.get(b'user.email', opttype='int'), None)
    WVEXCEPT(ConfigError, config.get, b'user.name', opttype='int')
    environ[b'MINGIT_COMPRESSION'] = b'8'
    WVPASSEQ(config.get(b'core.compression', opttype='int'), 8)
