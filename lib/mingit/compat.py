
# pylint: disable=unused-import
from os import environb as environ
from os import fsencode
import sys


def argv_bytes(x):
    """Return the original bytes passed to main() for an argv argument."""
    return fsencode(x)

def get_argvb():
    "Return a new list containing the current process argv bytes."
    return [fsencode(x) for x in sys.argv]
