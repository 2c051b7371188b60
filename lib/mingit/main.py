
from importlib import import_module
from pkgutil import iter_modules
import os, re, sys

from mingit import compat, io
from mingit.compat import environ
from mingit.config import ConfigError
from mingit.git import GitError
from mingit.helpers import (EXIT_FAILURE,
                            columnate,
                            die_if_errors,
                            handle_ctrl_c,
                            log)
from mingit.io import path_msg
import mingit.cmd


def usage(msg=""):
    log('Usage: mingit [-?|--help] [-d GIT_DIR] [--debug] '
        '<command> [options...]\n\n')
    common = {
        'cat-file': 'Print the content, kind, or size of an object',
        'commit-tree': 'Create a commit object for a tree',
        'hash-object': 'Compute (and optionally store) the hash of a file',
        'help': 'Print detailed help for the given command',
        'init': 'Create an empty repository',
        'ls-tree': 'List the entries of a tree object',
        'write-tree': 'Store the current directory as a tree',
    }

    log('Common commands:\n')
    for cmd,synopsis in sorted(common.items()):
        log('    %-12s %s\n' % (cmd, synopsis))
    log('\n')

    cmds = set()
    for _, name, _ in iter_modules(path=mingit.cmd.__path__):
        name = name.replace('_','-')
        if name not in common:
            cmds.add(name)
    if cmds:
        log('Other available commands:\n')
        log(columnate(sorted(cmds), '    '))
        log('\n')

    log("See 'mingit help COMMAND' for more information on " +
        "a specific command.\n")
    if msg:
        log("\n%s\n" % msg)
    sys.exit(99)


def extract_argval(args):
    """Assume args (all elements bytes) starts with a -x, --x, or --x=,
argument that requires a value and return that value and the remaining
args.  Exit with an errror if the value is missing.

    """
    arg = args[0]
    if b'=' in arg:
        val = arg.split(b'=', 1)[1]
        if not val:
            usage('error: no value provided for %s option' % path_msg(arg))
        return val, args[1:]
    if len(args) < 2:
        usage('error: no value provided for %s option' % path_msg(arg))
    return args[1], args[2:]


def parse_global_args(args):
    """Return (git_dir, subcmd) for args (argv without argv[0]),
    handling the global options."""
    help_requested = None
    git_dir = None
    subcmd = None
    while args:
        arg = args[0]
        if arg in (b'-?', b'--help'):
            help_requested = True
            args = args[1:]
        elif arg in (b'-V', b'--version'):
            subcmd = [b'version']
            args = args[1:]
        elif arg in (b'-D', b'--debug'):
            io.buglvl += 1
            environ[b'MINGIT_DEBUG'] = b'%d' % io.buglvl
            args = args[1:]
        elif arg in (b'-d', b'--git-dir') or arg.startswith(b'--git-dir='):
            git_dir, args = extract_argval(args)
        elif arg.startswith(b'-'):
            usage('error: unexpected option "%s"' % path_msg(arg))
        else:
            break

    subcmd = subcmd or args
    if len(subcmd) == 0:
        if help_requested:
            subcmd = [b'help']
        else:
            usage()
    if help_requested and subcmd[0] != b'help':
        subcmd = [b'help'] + subcmd
    if len(subcmd) > 1 and subcmd[1] == b'--help' and subcmd[0] != b'help':
        subcmd = [b'help', subcmd[0]] + subcmd[2:]
    return git_dir, subcmd


_subcmd_rx = re.compile(br'[a-z0-9][-a-z0-9]*\Z')

def import_subcmd(name):
    if not _subcmd_rx.match(name):
        return None
    cmd_module_name = 'mingit.cmd.' + name.decode('ascii').replace('-', '_')
    try:
        return import_module(cmd_module_name)
    except ModuleNotFoundError as ex:
        if ex.name != cmd_module_name:
            raise ex
    return None


def run_subcmd(module, args):
    try:
        return module.main(args)
    except (GitError, ConfigError) as ex:
        log('mingit: error: %s\n' % ex)
    except OSError as ex:
        if ex.filename is not None:
            log('mingit: error: %s: %s\n' % (path_msg(ex.filename),
                                             ex.strerror))
        else:
            log('mingit: error: %s\n' % ex)
    return EXIT_FAILURE


def main(argv=None):
    handle_ctrl_c()
    args = compat.get_argvb() if argv is None else argv
    if len(args) < 2:
        usage()
    git_dir, subcmd = parse_global_args(args[1:])

    # Make the directory absolute, so commands aren't affected by chdir.
    if git_dir:
        environ[b'MINGIT_DIR'] = os.path.abspath(git_dir)

    cmd_module = import_subcmd(subcmd[0])
    if not cmd_module:
        usage('error: unknown command "%s"' % path_msg(subcmd[0]))

    try:
        rc = run_subcmd(cmd_module, subcmd)
    except KeyboardInterrupt:
        rc = 130
    if rc:
        sys.exit(rc)
    die_if_errors()


if __name__ == "__main__":
    main()
