
import os

from mingit.compat import environ


def defaultrepo():
    """Return the repository named by MINGIT_DIR or GIT_DIR, or ./.git."""
    repo = environ.get(b'MINGIT_DIR') or environ.get(b'GIT_DIR')
    if repo:
        return repo
    return os.path.join(os.getcwdb(), b'.git')
