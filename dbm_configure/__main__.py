"""dbm-configure usage:

dbm-configure [--with-dbm-type=LIST] [--with-dbm-dir=DIR] [-o FILE]

run with --help for more information
"""

import sys
import py

from dbm_configure import option
from dbm_configure.configure import Platform, log, ansi_log
from dbm_configure.cbuild import ExternalCompilationInfo
from dbm_configure.detect import configure_dbm
from dbm_configure.buildinfo import write_build_info, write_config_h


def main(argv=None):
    parser = option.get_standard_options()
    options = option.process_options(parser, argv)
    if options.quiet:
        py.log.setconsumer("dbm", None)
    elif options.verbose:
        py.log.setconsumer("cbuild", ansi_log)

    eci = ExternalCompilationInfo(include_dirs=options.include_dirs,
                                  library_dirs=options.library_dirs)
    platform = Platform(cache_root=options.cache_dir)
    config = configure_dbm(options.families, platform, eci)
    if config is None:
        # not an error: the _dbm extension is just not built
        return 0

    path = write_build_info(config, options.output)
    log.info('wrote %s' % (path,))
    if options.config_h:
        path = write_config_h(config, options.config_h)
        log.info('wrote %s' % (path,))
    return 0


if __name__ == '__main__':
    sys.exit(main())
