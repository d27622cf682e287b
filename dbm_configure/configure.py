"""Probing the host C environment with trial compilations.

Each thing we want to know about is described by an entry object
(HaveHeader, HaveType, HaveFunc, ...).  An entry knows which C code to
write and whether it must also link; a Platform answers it by running
the compiler, and a Checker records the outcome into a ConfigState.
"""

import re
import py
from dbm_configure.cbuild import ExternalCompilationInfo, try_compile
from dbm_configure.gcc_cache import try_compile_cache
from dbm_configure.ansi_print import ansi_log

log = py.log.Producer("dbm")
py.log.setconsumer("dbm", ansi_log)

UNIVERSAL_INTS = ['short', 'int', 'long', 'long long']


def tr_cpp(name):
    """Turn 'sys/cdefs.h' into 'SYS_CDEFS_H', suitable for a macro name."""
    return re.sub(r'[^A-Za-z0-9_]', '_', name).upper()

def sans_arguments(call):
    return call.split('(', 1)[0].strip()

# ____________________________________________________________
#
# Configuration state

class ConfigState(object):
    """The defines and link libraries found so far.

    'defines' is a list of (name, value) pairs; a value of None stands
    for a plain '-Dname'.  'libraries' is in link order, so libraries
    added later come first.
    """

    def __init__(self, defines=(), libraries=()):
        self.defines = list(defines)
        self.libraries = list(libraries)

    def define(self, name, value=None):
        self.defines.append((name, value))

    def add_library(self, library):
        if library not in self.libraries:
            self.libraries.insert(0, library)

    def snapshot(self):
        return (tuple(self.defines), tuple(self.libraries))

    def restore(self, snapshot):
        defines, libraries = snapshot
        self.defines = list(defines)
        self.libraries = list(libraries)

    def defined(self, name):
        for key, value in self.defines:
            if key == name:
                return True
        return False

    def __repr__(self):
        return '<ConfigState defines=%r libraries=%r>' % (self.defines,
                                                          self.libraries)

# ____________________________________________________________
#
# Entries

class CConfigEntry(object):
    "Abstract base class."
    link = False
    define = None
    libraries = ()

    def describe(self):
        return self.name

    def prepare_code(self):
        raise NotImplementedError

    def question(self, ask_gcc):
        return ask_gcc('\n'.join(self.prepare_code()), self.link)

    def record(self, state, result):
        if result and self.define is not None:
            state.define(self.define)


class HaveHeader(CConfigEntry):
    """A header file that can be included."""
    def __init__(self, header):
        self.name = header
        self.define = 'HAVE_' + tr_cpp(header)

    def prepare_code(self):
        yield '#include <%s>' % (self.name,)
        yield 'int main(void) { return 0; }'


class HaveType(CConfigEntry):
    """A type name defined by the headers."""
    def __init__(self, name):
        self.name = name
        self.define = 'HAVE_TYPE_' + tr_cpp(name)

    def prepare_code(self):
        yield 'typedef %s conftest_type;' % (self.name,)
        yield 'int conftestval[sizeof(conftest_type)?1:-1];'
        yield 'int main(void) { return 0; }'


class HaveMacro(CConfigEntry):
    """A preprocessor macro defined by the headers.  Records nothing."""
    def __init__(self, macro):
        self.name = macro

    def prepare_code(self):
        yield '#ifndef %s' % (self.name,)
        yield '# error'
        yield '|:/ === %s undefined === /:|' % (self.name,)
        yield '#endif'
        yield 'int main(void) { return 0; }'


class HaveFunc(CConfigEntry):
    """A function that can be called and linked.  'call' is a complete
    call expression, e.g. 'dbm_open("", 0, 0)'.
    """
    link = True

    def __init__(self, call):
        self.call = call
        self.name = sans_arguments(call)
        self.define = 'HAVE_' + tr_cpp(self.name)

    def describe(self):
        return self.call

    def prepare_code(self):
        yield 'int main(void) {'
        yield '    %s;' % (self.call,)
        yield '    return 0;'
        yield '}'


class HaveLibrary(HaveFunc):
    """A library that links, optionally providing the function called
    by 'call'.  On success the library is added to the link libraries.
    """
    def __init__(self, library, call=None):
        self.library = library
        self.call = call
        self.name = library
        self.libraries = (library,)
        self.define = 'HAVE_LIB' + tr_cpp(library)

    def describe(self):
        if self.call is None:
            return '-l%s' % (self.library,)
        return '%s in -l%s' % (self.call, self.library)

    def prepare_code(self):
        if self.call is None:
            yield 'int main(void) { return 0; }'
        else:
            for line in HaveFunc.prepare_code(self):
                yield line

    def record(self, state, result):
        if result:
            state.add_library(self.library)
        HaveFunc.record(self, state, result)


class HaveVar(CConfigEntry):
    """A variable declared by the headers and provided at link time."""
    link = True

    def __init__(self, name):
        self.name = name
        self.define = 'HAVE_' + tr_cpp(name)

    def prepare_code(self):
        yield 'int main(void) {'
        yield '    const volatile void *volatile conftest_p;'
        yield '    conftest_p = &(&%s)[0];' % (self.name,)
        yield '    return !conftest_p;'
        yield '}'


class HaveLibVar(CConfigEntry):
    """A variable exported by a library, whether or not the headers
    declare it.  We declare it ourselves with the given C type.
    """
    link = True

    def __init__(self, name, ctype='int'):
        self.name = name
        self.ctype = ctype
        self.define = 'HAVE_LIBVAR_' + tr_cpp(name)

    def prepare_code(self):
        yield 'int main(void) {'
        yield '    typedef %s conftest_type;' % (self.ctype,)
        yield '    extern conftest_type %s;' % (self.name,)
        # volatile, or an optimizing CFLAGS drops the reference
        yield '    conftest_type *volatile conftest_var = &%s;' % (self.name,)
        yield '    return !conftest_var;'
        yield '}'


class ConvertibleInt(CConfigEntry):
    """The standard integer type with the same size as a struct member,
    given as 'type.member'.  Only compile-time checks are used, so this
    also works when cross-compiling.  The result is the C type name, or
    None.
    """
    def __init__(self, expr):
        self.name = expr
        self.typename, self.member = expr.split('.', 1)
        self.macname = tr_cpp('%s_%s' % (self.typename, self.member))

    def describe(self):
        return 'convertible type of %s' % (self.name,)

    def prepare_code(self, ctype='int'):
        yield 'static %s *conftest_ptr;' % (self.typename,)
        yield 'int conftest_array[(sizeof(conftest_ptr->%s) == sizeof(%s))' \
              ' ? 1 : -1];' % (self.member, ctype)
        yield 'int main(void) { return 0; }'

    def question(self, ask_gcc):
        for ctype in UNIVERSAL_INTS:
            if ask_gcc('\n'.join(self.prepare_code(ctype)), False):
                return ctype
        return None

    def record(self, state, result):
        if result:
            state.define('TYPEOF_' + self.macname, result)

# ____________________________________________________________
#
# Asking the compiler

def uniquefilepath(dirpath, LAST=[0]):
    i = LAST[0]
    LAST[0] += 1
    return dirpath.join('dbmconfcheck_%d.c' % i)


class Platform(object):
    """Answers entries by running the host C compiler in 'tmpdir'.

    If 'cache_root' is given, outcomes are cached there across runs.
    The compiler output of every probe is appended to 'config.log'.
    """

    def __init__(self, tmpdir=None, cache_root=None):
        if tmpdir is None:
            tmpdir = py.path.local.make_numbered_dir(prefix='dbm_configure-')
        self.tmpdir = py.path.local(tmpdir).ensure(dir=1)
        self.cache_root = cache_root
        self.logfile = self.tmpdir.join('config.log')

    def check(self, entry, eci):
        def ask_gcc(code, link=True):
            return self.ask_gcc(code, eci, link)
        return entry.question(ask_gcc)

    def ask_gcc(self, code, eci, link=True):
        path = uniquefilepath(self.tmpdir)
        f = path.open('w')
        try:
            eci.write_c_header(f)
            f.write(code + '\n')
        finally:
            f.close()
        if self.cache_root is not None:
            return try_compile_cache([path], eci, self.cache_root, link=link,
                                     logfile=str(self.logfile))
        return try_compile([path], eci, link=link, logfile=str(self.logfile))


class Checker(object):
    """Runs entries on a platform and accumulates what they find.

    The base compilation info 'eci' carries the include and library
    directories; headers, macros and the libraries found so far are
    added for each check.
    """

    def __init__(self, platform, eci=None, state=None):
        if eci is None:
            eci = ExternalCompilationInfo()
        if state is None:
            state = ConfigState()
        self.platform = platform
        self.eci = eci
        self.state = state

    def compilation_info(self, entry, headers=(), macros=()):
        libraries = list(entry.libraries)
        for lib in self.state.libraries + list(self.eci.libraries):
            if lib not in libraries:
                libraries.append(lib)
        return self.eci.copy(includes=self.eci.includes + tuple(headers),
                             macros=self.eci.macros + tuple(macros),
                             libraries=libraries)

    def check(self, entry, headers=(), macros=()):
        eci = self.compilation_info(entry, headers, macros)
        result = self.platform.check(entry, eci)
        if result is True:
            answer = 'yes'
        elif not result:
            answer = 'no'
        else:
            answer = result
        log.checking('%s... %s' % (checking_message(entry, headers, macros),
                                   answer))
        entry.record(self.state, result)
        return result


def checking_message(entry, headers=(), macros=()):
    msg = 'for %s' % (entry.describe(),)
    if headers:
        msg += ' in %s' % (','.join(headers),)
    for name, value in macros:
        if value is None:
            msg += ' with -D%s' % (name,)
        else:
            msg += ' with -D%s=%s' % (name, value)
    return msg
