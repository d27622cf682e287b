"""The ndbm implementations we know how to look for.

Each family says which headers may declare its ndbm interface, how its
dbm_open() is linked, and which version symbols are worth recording.
"""

import re

from dbm_configure.configure import HaveFunc, HaveVar, HaveLibVar

GENERIC_HEADER = 'ndbm.h'
HSEARCH_MACRO = ('DB_DBM_HSEARCH', None)


class DbmFamily(object):
    kind = 'other'
    in_libc = False

    def __init__(self, name, headers=(GENERIC_HEADER,), hsearch=False,
                 prerequisite=None):
        self.name = name
        self.headers = tuple(headers)
        self.hsearch = hsearch
        self.prerequisite = prerequisite

    @property
    def library(self):
        if self.in_libc:
            return None
        return self.name

    def compile_macros(self):
        """Macros that every probe of this family is compiled with."""
        if self.hsearch:
            return [HSEARCH_MACRO]
        return []

    def version_probes(self):
        """Informational entries, checked once a header/library pair
        is found to work.  Their outcome never rejects the pair.
        """
        return []

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


class LibcNDBM(DbmFamily):
    """ndbm provided by the C library itself: the original 4.3BSD ndbm,
    or Berkeley DB 1 in the libc of 4.4BSD and its descendants."""
    kind = 'libc'
    in_libc = True


class BerkeleyDB(DbmFamily):
    kind = 'berkeley'

    def version_probes(self):
        return [HaveFunc('db_version((int *)0, (int *)0, (int *)0)')]


class GDBM(DbmFamily):
    kind = 'gdbm'

    def version_probes(self):
        # ndbm.h only declares gdbm_version since gdbm 1.9, and gdbm.h
        # can't be included with it as both define 'datum'.
        return [HaveVar('gdbm_version'),
                HaveLibVar('gdbm_version', 'char *')]


class QDBM(DbmFamily):
    kind = 'qdbm'

    def version_probes(self):
        return [HaveVar('dpversion')]


_gdbm_headers = ['gdbm-ndbm.h', 'ndbm.h', 'gdbm/ndbm.h']

FAMILIES = {}
for _family in [
        LibcNDBM('libc', ['ndbm.h']),
        BerkeleyDB('db', ['db.h'], hsearch=True),
        BerkeleyDB('db1', ['db1/ndbm.h', 'db1.h', 'ndbm.h']),
        BerkeleyDB('db2', ['db2/db.h', 'db2.h', 'db.h'], hsearch=True),
        BerkeleyDB('db3', ['db3/db.h', 'db3.h', 'db.h'], hsearch=True),
        BerkeleyDB('db4', ['db4/db.h', 'db4.h', 'db.h'], hsearch=True),
        BerkeleyDB('db5', ['db5/db.h', 'db5.h', 'db.h'], hsearch=True),
        GDBM('gdbm', _gdbm_headers),                    # until 1.8.0
        GDBM('gdbm_compat', _gdbm_headers,              # since 1.8.1
             prerequisite='gdbm'),
        QDBM('qdbm', ['relic.h', 'qdbm/relic.h']),
        ]:
    FAMILIES[_family.name] = _family
del _family

DEFAULT_ORDER = ('libc', 'db', 'db2', 'db1', 'db5', 'db4', 'db3',
                 'gdbm', 'gdbm_compat', 'qdbm')


def get_family(name):
    """Return the family called 'name'.  Unknown names give a family
    that tries ndbm.h and links against the library of that name; it is
    still a Berkeley DB for names like 'db6' and a gdbm for names
    starting with 'gdbm', so that its own ndbm.h is not rejected.
    """
    try:
        return FAMILIES[name]
    except KeyError:
        pass
    if re.match(r'db\d\Z', name):
        return BerkeleyDB(name)
    if name.startswith('gdbm'):
        return GDBM(name)
    return DbmFamily(name)

def get_families(names=None):
    if names is None:
        names = DEFAULT_ORDER
    return [get_family(name) for name in names]
