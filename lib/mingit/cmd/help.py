
import sys

from mingit import options
from mingit.compat import argv_bytes
from mingit.io import path_msg


optspec = """
mingit help [command]
"""

def main(argv):
    # Imported here since mingit.main imports the subcommands
    from mingit.main import import_subcmd, usage
    o = options.Options(optspec)
    opt, flags, extra = o.parse_bytes(argv[1:])

    if len(extra) == 0:
        usage()
    elif len(extra) == 1:
        name = argv_bytes(extra[0])
        module = import_subcmd(name)
        if not module:
            o.fatal('unknown command "%s"' % path_msg(name))
        sys.stdout.write(options.Options(module.optspec).usage_text())
        return 0
    else:
        o.fatal("exactly one command name expected")
    return 0
