"""
A color print.
"""

import sys

from py.io import ansi_print

class AnsiLog:

    KW_TO_COLOR = {
        'WARNING': (31,),
        'info': (35,),
        'checking': (),
        'execute': (34,),
    }

    def __init__(self):
        self.isatty = getattr(sys.stderr, 'isatty', lambda: False)

    def __call__(self, msg):
        esc = []
        for kw in msg.keywords:
            esc.extend(self.KW_TO_COLOR.get(kw, ()))
        if not self.isatty():
            esc = []
        for line in msg.content().splitlines():
            ansi_print("[%s] %s" % (":".join(msg.keywords), line),
                       tuple(esc))

ansi_log = AnsiLog()
