from hashlib import md5
import py, os
from dbm_configure.cbuild import try_compile

def cache_file_path(c_files, eci, cache_root, cachename, link=True):
    "Builds a filename to cache compilation data"
    cache_dir = py.path.local(cache_root).join(cachename).ensure(dir=1)
    filecontents = [py.path.local(c_file).read() for c_file in c_files]
    key = repr((filecontents, eci, link))
    hash = md5(key.encode('utf-8')).hexdigest()
    return cache_dir.join(hash)

def try_atomic_write(path, data):
    path = str(path)
    tmppath = '%s~%d' % (path, os.getpid())
    f = open(tmppath, 'w')
    f.write(data)
    f.close()
    try:
        os.rename(tmppath, path)
    except OSError:
        try:
            os.unlink(tmppath)
        except OSError:
            pass

def try_compile_cache(c_files, eci, cache_root, link=True, logfile=None):
    "Try to compile (and link) a program.  Caches the outcome."
    path = cache_file_path(c_files, eci, cache_root, 'try_compile_cache',
                           link)
    try:
        data = path.read()
    except py.error.Error:
        pass
    else:
        if data in ('True', 'False'):
            return data == 'True'
    #
    result = try_compile(c_files, eci, link=link, logfile=logfile)
    try_atomic_write(path, repr(result))
    return result
