# This is where the options of dbm-configure are defined.

import os
import re
import optparse

TYPE_ENV = 'DBM_CONFIGURE_TYPE'
CACHE_ENV = 'DBM_CONFIGURE_CACHE'

usage = """%prog [options]

Find an ndbm-compatible library and header on this host and write the
build settings of the _dbm extension."""


class DbmOptions(object):
    """The parsed configuration of one run."""

    def __init__(self, families=None, include_dirs=(), library_dirs=(),
                 output='_dbm_config.py', config_h=None, cache_dir=None,
                 quiet=False, verbose=False):
        self.families = families
        self.include_dirs = list(include_dirs)
        self.library_dirs = list(library_dirs)
        self.output = output
        self.config_h = config_h
        self.cache_dir = cache_dir
        self.quiet = quiet
        self.verbose = verbose

    def __repr__(self):
        return '<DbmOptions families=%r include_dirs=%r library_dirs=%r>' % (
            self.families, self.include_dirs, self.library_dirs)


def split_dbm_types(value):
    """'gdbm, qdbm db4' -> ['gdbm', 'qdbm', 'db4']"""
    return [name for name in re.split(r'[ ,]+', value) if name]


def get_standard_options():
    parser = optparse.OptionParser(usage=usage)
    parser.add_option(
        '--with-dbm-type', dest='dbm_type', metavar='LIST',
        help="libraries to try, in order, separated by spaces or commas "
             "(default: $%s, or all known ones)" % (TYPE_ENV,))
    parser.add_option(
        '--with-dbm-dir', dest='dbm_dir', metavar='DIR',
        help="look in DIR/include and DIR/lib")
    parser.add_option(
        '--with-dbm-include', dest='dbm_include', metavar='DIR',
        help="directory with the dbm headers")
    parser.add_option(
        '--with-dbm-lib', dest='dbm_lib', metavar='DIR',
        help="directory with the dbm libraries")
    parser.add_option(
        '-o', '--output', dest='output', default='_dbm_config.py',
        metavar='FILE', help="where to write the build descriptor "
                             "(default: %default)")
    parser.add_option(
        '--config-h', dest='config_h', metavar='FILE',
        help="also write the defines as a C header")
    parser.add_option(
        '--cache-dir', dest='cache_dir', metavar='DIR',
        help="cache probe results in DIR (default: $%s)" % (CACHE_ENV,))
    parser.add_option(
        '-q', '--quiet', dest='quiet', action='store_true', default=False,
        help="don't report the checks")
    parser.add_option(
        '-v', '--verbose', dest='verbose', action='store_true',
        default=False, help="also show the compiler commands")
    return parser


def process_options(parser, argv=None, environ=None):
    if environ is None:
        environ = os.environ
    options, args = parser.parse_args(argv)
    if args:
        parser.error("unexpected arguments: %s" % (' '.join(args),))

    dbm_type = options.dbm_type
    if dbm_type is None:
        dbm_type = environ.get(TYPE_ENV)
    families = None
    if dbm_type is not None:
        families = split_dbm_types(dbm_type)

    include_dirs = []
    library_dirs = []
    if options.dbm_dir:
        include_dirs.append(os.path.join(options.dbm_dir, 'include'))
        library_dirs.append(os.path.join(options.dbm_dir, 'lib'))
    if options.dbm_include:
        include_dirs.insert(0, options.dbm_include)
    if options.dbm_lib:
        library_dirs.insert(0, options.dbm_lib)

    cache_dir = options.cache_dir
    if cache_dir is None:
        cache_dir = environ.get(CACHE_ENV) or None

    return DbmOptions(families=families,
                      include_dirs=include_dirs,
                      library_dirs=library_dirs,
                      output=options.output,
                      config_h=options.config_h,
                      cache_dir=cache_dir,
                      quiet=options.quiet,
                      verbose=options.verbose)
