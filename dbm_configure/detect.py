"""Finding a working ndbm header/library pair.

find_dbm() tries every header of every family in order and commits the
first pair that passes db_check().  A failed candidate leaves the
defines and libraries exactly as they were before it was tried.
"""

from dbm_configure.configure import (Checker, Platform, HaveType, HaveFunc,
     HaveLibrary, HaveMacro, HaveHeader, ConvertibleInt, log)
from dbm_configure.families import GENERIC_HEADER, get_families


class DbmMatch(object):
    """A header/library pair that passed db_check()."""

    def __init__(self, family, header, macros=()):
        self.family = family
        self.header = header
        self.macros = list(macros)
        self.found = []

    def __repr__(self):
        return '<DbmMatch %s in %s>' % (self.family.name, self.header)


class DbmConfig(object):
    """Everything needed to build the _dbm extension."""

    def __init__(self, match, defines, libraries, include_dirs=(),
                 library_dirs=()):
        self.match = match
        self.defines = list(defines)
        self.libraries = list(libraries)
        self.include_dirs = list(include_dirs)
        self.library_dirs = list(library_dirs)

    @property
    def family(self):
        return self.match.family

    @property
    def header(self):
        return self.match.header

    def __repr__(self):
        return '<DbmConfig %s in %s>' % (self.family.name, self.header)


def db_check(checker, family, header):
    """Check that 'header' and the library of 'family' belong together.
    Returns a DbmMatch or None.
    """
    macros = family.compile_macros()

    if family.prerequisite is not None:
        if not checker.check(HaveLibrary(family.prerequisite)):
            return None

    if not checker.check(HaveType('DBM'), [header], macros):
        return None

    if family.in_libc:
        open_entry = HaveFunc('dbm_open("", 0, 0)')
    else:
        open_entry = HaveLibrary(family.library, 'dbm_open("", 0, 0)')
    if not checker.check(open_entry, [header], macros):
        return None

    # dbm_clearerr() is part of every ndbm, but gdbm until 1.8.3 makes
    # it an empty macro in its header and leaves it out of the library.
    # Failing to link it means a Berkeley DB ndbm.h was picked up for an
    # old gdbm library.
    if not checker.check(HaveFunc('dbm_clearerr((DBM *)0)'), [header],
                         macros):
        return None

    # ndbm.h comes from the original 4.3BSD dbm, from Berkeley DB 1 in
    # 4.4BSD libc, and from the compatibility layer of gdbm.  Make sure
    # it belongs to the library we are testing.  We assume that a libc
    # with ndbm functions has the matching ndbm.h.
    if header == GENERIC_HEADER and not family.in_libc:
        # Berkeley DB's ndbm.h includes db.h, which defines _DB_H_
        if family.kind != 'berkeley' and \
                checker.check(HaveMacro('_DB_H_'), [header], macros):
            return None
        # gdbm's ndbm.h includes gdbm.h since 1.9, which defines _GDBM_H_
        if family.kind != 'gdbm' and \
                checker.check(HaveMacro('_GDBM_H_'), [header], macros):
            return None
        # 4.3BSD's ndbm.h defines _DBM_IOERR; that ndbm lives in libc
        if checker.check(HaveMacro('_DBM_IOERR'), [header], macros):
            return None

    for entry in family.version_probes():
        checker.check(entry, [header], macros)

    return DbmMatch(family, header, macros)


def commit(state, match):
    for macro in match.macros:
        state.define(*macro)
    state.define('DBM_HDR', '<%s>' % (match.header,))
    match.found.append(match.header)


def find_dbm(checker, families):
    """Return the first DbmMatch over 'families' and their headers, in
    order, or None.  The match is committed into checker.state.
    """
    for family in families:
        for header in family.headers:
            snapshot = checker.state.snapshot()
            match = db_check(checker, family, header)
            if match is None:
                checker.state.restore(snapshot)
                continue
            commit(checker.state, match)
            return match
    return None


OPTIONAL_FEATURES = (
    HaveHeader('cdefs.h'),
    HaveHeader('sys/cdefs.h'),
    HaveFunc('dbm_pagfno((DBM *)0)'),
    HaveFunc('dbm_dirfno((DBM *)0)'),
    ConvertibleInt('datum.dsize'),
)

def probe_optional_features(checker, match, features=OPTIONAL_FEATURES):
    for entry in features:
        if isinstance(entry, HaveHeader):
            checker.check(entry)
        else:
            checker.check(entry, match.found, match.macros)


def configure_dbm(families=None, platform=None, eci=None,
                  features=OPTIONAL_FEATURES):
    """Find an ndbm library on this host.  'families' is a list of
    DbmFamily objects or names (the default order if None).

    Returns a DbmConfig, or None if no header/library pair works.
    """
    if families is None or families and isinstance(families[0], str):
        families = get_families(families)
    if platform is None:
        platform = Platform()
    checker = Checker(platform, eci)
    match = find_dbm(checker, families)
    if match is None:
        log.WARNING('no usable ndbm library found among: %s' % (
            ' '.join([family.name for family in families]),))
        return None
    log.info('using %s from -l%s' % (match.header,
                                     match.family.library or 'c'))
    probe_optional_features(checker, match, features)
    return DbmConfig(match, checker.state.defines, checker.state.libraries,
                     checker.eci.include_dirs, checker.eci.library_dirs)
