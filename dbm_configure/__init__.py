"""Find the host's ndbm library and derive the build settings of a
native _dbm extension."""

__version__ = '0.1.0'
