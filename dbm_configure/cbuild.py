import os
import subprocess
import py

import setuptools       # supplies distutils on interpreters without it
from distutils import errors as distutils_errors
from distutils.ccompiler import new_compiler
from distutils.sysconfig import customize_compiler

log = py.log.Producer("cbuild")
py.log.setconsumer("cbuild", None)      # shown with --verbose


class ExternalCompilationInfo(object):

    _ATTRIBUTES = ['includes', 'include_dirs', 'macros', 'libraries',
                   'library_dirs']

    def __init__(self,
                 includes           = [],
                 include_dirs       = [],
                 macros             = [],
                 libraries          = [],
                 library_dirs       = []):
        """
        includes: list of .h file names to be #include'd from the
        generated .c files.

        include_dirs: list of dir names that is passed to the C compiler

        macros: list of (name, value) pairs passed to the C compiler as
        -D options; a value of None gives a plain '-Dname'.

        libraries: list of library names that is passed to the linker,
        in link order

        library_dirs: list of dir names that is passed to the linker
        """
        for name in self._ATTRIBUTES:
            value = locals()[name]
            assert isinstance(value, (list, tuple))
            setattr(self, name, tuple(value))

    def __repr__(self):
        info = []
        for attr in self._ATTRIBUTES:
            val = getattr(self, attr)
            info.append("%s=%s" % (attr, repr(val)))
        return "<ExternalCompilationInfo (%s)>" % ", ".join(info)

    def write_c_header(self, fileobj):
        for path in self.includes:
            fileobj.write('#include <%s>\n' % (path,))

    def copy(self, **kwds):
        d = {}
        for attr in self._ATTRIBUTES:
            d[attr] = getattr(self, attr)
        d.update(kwds)
        return ExternalCompilationInfo(**d)


def try_compile(c_files, eci, link=True, logfile=None):
    """Check that 'c_files' compile (and link into an executable, if
    'link' is set).  Compiler and linker output goes to 'logfile'.
    """
    try:
        build_executable(c_files, eci, link=link, logfile=logfile)
        result = True
    except (distutils_errors.CompileError,
            distutils_errors.LinkError):
        result = False
    return result


def run_logged(cmd, logfile=None):
    """Run the command 'cmd', sending its output to 'logfile'.
    Raises DistutilsExecError if the command fails.
    """
    log.execute(' '.join(cmd))
    try:
        pipe = subprocess.Popen(cmd, stdout=subprocess.PIPE,
                                stderr=subprocess.STDOUT)
    except OSError as e:
        raise distutils_errors.DistutilsExecError(
            "command %r failed: %s" % (cmd[0], e))
    output, _ = pipe.communicate()
    if logfile is not None:
        f = py.path.local(logfile).open('a')
        try:
            f.write(' '.join(cmd) + '\n')
            f.write(output.decode('utf-8', 'replace'))
        finally:
            f.close()
    if pipe.returncode != 0:
        raise distutils_errors.DistutilsExecError(
            "command %r failed with exit status %d" % (cmd[0],
                                                      pipe.returncode))


class CCompiler:

    def __init__(self, cfilenames, eci, logfile=None):
        self.cfilenames = cfilenames
        self.libraries = list(eci.libraries)
        self.include_dirs = list(eci.include_dirs)
        self.library_dirs = list(eci.library_dirs)
        self.macros = list(eci.macros)
        self.logfile = logfile
        self.outputfilename = py.path.local(cfilenames[0]).new(ext='')
        self.eci = eci

    def build(self, link=True):
        saved_environ = os.environ.copy()
        try:
            self._build(link)
        finally:
            # workaround for a distutils bugs where some env vars can
            # become longer and longer every time it is used
            for key, value in saved_environ.items():
                if os.environ.get(key) != value:
                    os.environ[key] = value

    def _spawn(self, cmd):
        run_logged(cmd, self.logfile)

    def _build(self, link):
        compiler = new_compiler(force=1)
        customize_compiler(compiler)
        compiler.spawn = self._spawn
        objects = []
        for cfile in self.cfilenames:
            cfile = py.path.local(cfile)
            old = cfile.dirpath().chdir()
            try:
                res = compiler.compile([cfile.basename],
                                       macros=self.macros,
                                       include_dirs=self.include_dirs)
                assert len(res) == 1
                cobjfile = cfile.dirpath().join(res[0])
                assert cobjfile.check()
                objects.append(str(cobjfile))
            finally:
                old.chdir()
        if link:
            compiler.link_executable(objects, str(self.outputfilename),
                                     libraries=self.libraries,
                                     library_dirs=self.library_dirs)


def build_executable(*args, **kwds):
    link = kwds.pop('link', True)
    compiler = CCompiler(*args, **kwds)
    compiler.build(link=link)
    return str(compiler.outputfilename)
