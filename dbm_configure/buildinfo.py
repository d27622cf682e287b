"""Writing out what configure_dbm() found.

The build descriptor is a small Python module that a setup script can
import or exec; make_extension() and make_ffibuilder() turn a DbmConfig
directly into something setuptools or cffi can build.
"""

import py

EXTENSION_NAME = '_dbm'


def descriptor_values(config):
    return {
        'DBM_FAMILY': config.family.name,
        'DBM_LIBRARY': config.family.library,
        'DBM_HEADER': config.header,
        'DEFINE_MACROS': [tuple(d) for d in config.defines],
        'LIBRARIES': list(config.libraries),
        'INCLUDE_DIRS': list(config.include_dirs),
        'LIBRARY_DIRS': list(config.library_dirs),
    }

def write_build_info(config, filename):
    values = descriptor_values(config)
    names = sorted(values)
    path = py.path.local(filename)
    path.dirpath().ensure(dir=1)
    f = path.open('w')
    try:
        f.write('# generated by dbm_configure, do not edit\n')
        f.write('\n')
        f.write('__all__ = %r\n' % (tuple(names),))
        f.write('\n')
        for key in names:
            f.write('%s = %r\n' % (key, values[key]))
    finally:
        f.close()
    return path

def read_build_info(filename):
    d = {}
    source = py.path.local(filename).read()
    exec(compile(source, str(filename), 'exec'), d)
    return dict([(key, d[key]) for key in d['__all__']])


def write_config_h(config, filename):
    path = py.path.local(filename)
    path.dirpath().ensure(dir=1)
    guard = 'DBM_CONFIG_H'
    f = path.open('w')
    try:
        f.write('/* generated by dbm_configure, do not edit */\n')
        f.write('#ifndef %s\n#define %s\n\n' % (guard, guard))
        for name, value in config.defines:
            if value is None:
                value = '1'
            f.write('#define %s %s\n' % (name, value))
        f.write('\n#endif /* %s */\n' % (guard,))
    finally:
        f.close()
    return path


def make_extension(config, sources, name=EXTENSION_NAME, **kwds):
    from setuptools import Extension
    return Extension(name, list(sources),
                     define_macros=list(config.defines),
                     include_dirs=list(config.include_dirs),
                     library_dirs=list(config.library_dirs),
                     libraries=list(config.libraries),
                     **kwds)


NDBM_CDEF = '''
typedef ... DBM;

typedef struct {
    char *dptr;
    %(dsize)s dsize;
    ...;
} datum;

#define DBM_INSERT ...
#define DBM_REPLACE ...

DBM *dbm_open(char *, int, int);
void dbm_close(DBM *);
datum dbm_fetch(DBM *, datum);
int dbm_store(DBM *, datum, datum, int);
int dbm_delete(DBM *, datum);
datum dbm_firstkey(DBM *);
datum dbm_nextkey(DBM *);
int dbm_error(DBM *);
int dbm_clearerr(DBM *);
'''

def make_ffibuilder(config, module_name='_dbm_cffi'):
    """A cffi builder for the ndbm interface of the chosen library."""
    import cffi
    dsize = 'int'
    for name, value in config.defines:
        if name == 'TYPEOF_DATUM_DSIZE':
            dsize = value
    ffi = cffi.FFI()
    ffi.cdef(NDBM_CDEF % {'dsize': dsize})
    ffi.set_source(module_name, '#include <%s>\n' % (config.header,),
                   define_macros=list(config.defines),
                   include_dirs=list(config.include_dirs),
                   library_dirs=list(config.library_dirs),
                   libraries=list(config.libraries))
    return ffi
