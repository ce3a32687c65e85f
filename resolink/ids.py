"""Generation of unique message IDs."""

import itertools
import random


class IdGenerator:
    """Produces IDs of the form ``RS_REPL_<prefix>_<n>`` with ``n`` counting from zero."""

    def __init__(self, prefix=None):
        self.prefix = f"{random.getrandbits(32):X}" if prefix is None else str(prefix)
        self._counter = itertools.count()

    def next(self):
        return f"RS_REPL_{self.prefix}_{next(self._counter)}"

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()