import py
from dbm_configure import buildinfo
from dbm_configure.detect import configure_dbm
from dbm_configure.test.fakehost import gdbm_compat_host, berkeley_db5_host


def make_config(host=None, **kwds):
    if host is None:
        host = gdbm_compat_host()
    return configure_dbm(platform=host, **kwds)


def test_write_and_read_build_info(tmpdir):
    config = make_config()
    path = buildinfo.write_build_info(config, tmpdir.join('sub', 'cfg.py'))
    assert path.check(file=1)
    d = buildinfo.read_build_info(path)
    assert d['DBM_FAMILY'] == 'gdbm_compat'
    assert d['DBM_LIBRARY'] == 'gdbm_compat'
    assert d['DBM_HEADER'] == 'ndbm.h'
    assert d['LIBRARIES'] == ['gdbm_compat', 'gdbm']
    assert d['DEFINE_MACROS'] == config.defines
    assert ('DBM_HDR', '<ndbm.h>') in d['DEFINE_MACROS']
    assert d['INCLUDE_DIRS'] == []
    assert d['LIBRARY_DIRS'] == []

def test_libc_has_no_library(tmpdir):
    from dbm_configure.test.fakehost import bsd_libc_host
    config = make_config(bsd_libc_host())
    path = buildinfo.write_build_info(config, tmpdir.join('cfg.py'))
    d = buildinfo.read_build_info(path)
    assert d['DBM_LIBRARY'] is None
    assert d['LIBRARIES'] == []

def test_write_config_h(tmpdir):
    config = make_config(berkeley_db5_host())
    path = buildinfo.write_config_h(config, tmpdir.join('dbm_config.h'))
    lines = path.read().splitlines()
    assert '#ifndef DBM_CONFIG_H' in lines
    assert '#define DB_DBM_HSEARCH 1' in lines
    assert '#define DBM_HDR <db.h>' in lines
    assert '#define TYPEOF_DATUM_DSIZE int' in lines
    assert lines[-1] == '#endif /* DBM_CONFIG_H */'

def test_make_extension():
    config = make_config()
    ext = buildinfo.make_extension(config, ['src/_dbmmodule.c'])
    assert ext.name == '_dbm'
    assert ext.sources == ['src/_dbmmodule.c']
    assert ext.libraries == ['gdbm_compat', 'gdbm']
    assert ('DBM_HDR', '<ndbm.h>') in ext.define_macros

def test_make_ffibuilder():
    py.test.importorskip('cffi')
    config = make_config(berkeley_db5_host(dsize='long'))
    ffi = buildinfo.make_ffibuilder(config)
    module_name, source, source_extension, kwds = ffi._assigned_source
    assert module_name == '_dbm_cffi'
    assert source == '#include <db.h>\n'
    assert kwds['libraries'] == ['db5']
    assert ('DB_DBM_HSEARCH', None) in kwds['define_macros']
    assert ('TYPEOF_DATUM_DSIZE', 'long') in kwds['define_macros']
    assert ffi.typeof('DBM *').kind == 'pointer'
