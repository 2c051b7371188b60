
from os.path import basename, dirname, realpath, relpath
from shutil import rmtree
from sys import stderr
from tempfile import mkdtemp
from traceback import extract_stack
import errno
import os
import pytest
import re
import subprocess
import sys
import tempfile

sys.path[:0] = ['lib']

from mingit import helpers
from mingit.compat import environ, fsencode
from mingit.helpers import finalized


_mingit_src_top = realpath(dirname(fsencode(__file__)))

# Tests compare paths against LocalRepo.repo_dir, which is a realpath
os.chdir(realpath(os.getcwd()))

# Make the test results available to fixtures
@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    other_hooks = yield
    report = other_hooks.get_result()
    mingit = item.__dict__.setdefault('mingit', {})
    mingit[report.when + '-report'] = report  # setup, call, teardown
    item.mingit = mingit

@pytest.fixture(autouse=True)
def no_lingering_errors():
    def fail_if_errors():
        if helpers.saved_errors:
            bt = extract_stack()
            src_file, src_line, src_func, src_txt = bt[-4]
            msg = 'saved_errors ' + repr(helpers.saved_errors)
            assert False, '%s:%-4d %s' % (basename(src_file),
                                          src_line, msg)

    fail_if_errors()
    helpers.clear_errors()
    yield None
    fail_if_errors()
    helpers.clear_errors()

# Assumes (of course) this file is at the top-level of the source tree
_mingit_test_dir = realpath(dirname(fsencode(__file__))) + b'/test'
_mingit_tmp = _mingit_test_dir + b'/tmp'
try:
    os.makedirs(_mingit_tmp)
except OSError as e:
    if e.errno != errno.EEXIST:
        raise

@pytest.fixture(autouse=True)
def common_test_environment(request):
    orig_env = environ.copy()
    def restore_env(_):
        for k, orig_v in orig_env.items():
            v = environ.get(k)
            if v is not orig_v:
                environ[k] = orig_v
        for k in list(environ.keys()):
            if k not in orig_env:
                del environ[k]
    rm_home = True
    def maybe_rm_home(home):
        if not rm_home:
            print('\nPreserving test HOME:', home, file=stderr)
            return
        rmtree(home)
    with finalized(mkdtemp(dir=_mingit_tmp, prefix=b'home-'), maybe_rm_home) as home, \
         finalized(lambda _: os.chdir(_mingit_src_top)), \
         finalized(restore_env):
        environ[b'HOME'] = home
        for k in (b'GIT_AUTHOR_NAME', b'GIT_AUTHOR_EMAIL',
                  b'GIT_COMMITTER_NAME', b'GIT_COMMITTER_EMAIL',
                  b'MINGIT_COMPRESSION'):
            environ.pop(k, None)
        yield None
        if request.node.mingit['call-report'].failed:
            rm_home = False

_safe_path_rx = re.compile(br'[^a-zA-Z0-9_-]')

@pytest.fixture()
def tmpdir(request):
    rp = realpath(fsencode(request.fspath))
    rp = relpath(rp, _mingit_test_dir)
    if request.function:
        rp += b'-' + fsencode(request.function.__name__)
    safe = _safe_path_rx.sub(b'-', rp)
    tmpdir = tempfile.mkdtemp(dir=_mingit_tmp, prefix=safe)
    yield tmpdir
    if request.node.mingit['call-report'].failed:
        print('\nPreserving:', b'test/' + relpath(tmpdir, _mingit_test_dir),
              file=sys.stderr)
    else:
        subprocess.call(['chmod', '-R', 'u+rwX', tmpdir])
        subprocess.call(['rm', '-rf', tmpdir])
