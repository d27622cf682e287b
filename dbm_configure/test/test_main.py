import py
from dbm_configure import __main__ as main_mod
from dbm_configure import cbuild
from dbm_configure.configure import ansi_log
from dbm_configure.buildinfo import read_build_info
from dbm_configure.test.fakehost import FakeHost, gdbm_compat_host


def setup_function(func):
    py.log.setconsumer("dbm", ansi_log)
    py.log.setconsumer("cbuild", None)

def teardown_function(func):
    py.log.setconsumer("dbm", ansi_log)
    py.log.setconsumer("cbuild", None)


def use_host(monkeypatch, host):
    monkeypatch.delenv('DBM_CONFIGURE_TYPE', raising=False)
    monkeypatch.delenv('DBM_CONFIGURE_CACHE', raising=False)
    platforms = []
    def make_platform(cache_root=None):
        platforms.append(cache_root)
        return host
    monkeypatch.setattr(main_mod, 'Platform', make_platform)
    return platforms


def test_main_writes_descriptor(tmpdir, monkeypatch):
    use_host(monkeypatch, gdbm_compat_host())
    output = tmpdir.join('build', '_dbm_config.py')
    config_h = tmpdir.join('build', 'dbm_config.h')
    assert main_mod.main(['-o', str(output), '--config-h', str(config_h),
                          '--with-dbm-type=gdbm_compat']) == 0
    d = read_build_info(output)
    assert d['DBM_FAMILY'] == 'gdbm_compat'
    assert '#define DBM_HDR <ndbm.h>' in config_h.read()

def test_main_nothing_found(tmpdir, monkeypatch):
    use_host(monkeypatch, FakeHost())
    output = tmpdir.join('_dbm_config.py')
    config_h = tmpdir.join('dbm_config.h')
    assert main_mod.main(['-o', str(output), '--config-h', str(config_h)]) == 0
    assert not output.check()
    assert not config_h.check()

def test_main_dirs_and_cache(tmpdir, monkeypatch):
    host = gdbm_compat_host()
    platforms = use_host(monkeypatch, host)
    output = tmpdir.join('_dbm_config.py')
    main_mod.main(['-o', str(output), '--with-dbm-dir=/opt/gdbm',
                   '--cache-dir', str(tmpdir.join('cache'))])
    assert platforms == [str(tmpdir.join('cache'))]
    d = read_build_info(output)
    assert d['INCLUDE_DIRS'] == ['/opt/gdbm/include']
    assert d['LIBRARY_DIRS'] == ['/opt/gdbm/lib']

def test_main_quiet(tmpdir, monkeypatch, capsys):
    use_host(monkeypatch, gdbm_compat_host())
    main_mod.main(['-q', '-o', str(tmpdir.join('_dbm_config.py'))])
    out, err = capsys.readouterr()
    assert '[dbm' not in err

def test_main_reports_checks(tmpdir, monkeypatch, capsys):
    use_host(monkeypatch, gdbm_compat_host())
    main_mod.main(['-o', str(tmpdir.join('_dbm_config.py'))])
    out, err = capsys.readouterr()
    assert '[dbm:checking] for DBM in ndbm.h... yes' in err
    assert '[dbm:info] using ndbm.h from -lgdbm_compat' in err

def test_main_verbose_shows_commands(tmpdir, monkeypatch, capsys):
    use_host(monkeypatch, gdbm_compat_host())
    cbuild.log.execute('cc -c dbmconfcheck_0.c')
    out, err = capsys.readouterr()
    assert '[cbuild' not in err
    main_mod.main(['-v', '-o', str(tmpdir.join('_dbm_config.py'))])
    cbuild.log.execute('cc -c dbmconfcheck_0.c')
    out, err = capsys.readouterr()
    assert '[cbuild:execute] cc -c dbmconfcheck_0.c' in err
