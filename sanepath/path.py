"""
file path manipulation and recursive directory operations

Copyright: 2011-2019 Ethan Furman
"""

import errno as _errno
import glob as _glob
import logging
import os as _os
import stat as _stat

__all__ = ['Path', 'PosixPath', 'WindowsPath', 'Segment', 'ospath']

logger = logging.getLogger('sanepath')
logger.addHandler(logging.NullHandler())

native_glob = _glob.glob
native_listdir = _os.listdir

_is_win = _os.path.__name__ == 'ntpath'


class Segment(str):
    "one component of a path; never contains a separator"

    _DRIVE_SEP = ':'

    @property
    def is_drive_letter(self):
        return len(self) >= 2 and self[1] == self._DRIVE_SEP

    def __repr__(self):
        return "Segment(%r)" % str(self)


class classform(object):
    """
    instance method that, looked up on a flavor class, takes the path as its
    first argument:  PosixPath.sanitize('a//b') is PosixPath('a//b').sanitize()
    """

    def __init__(self, func):
        self.func = func
        self.__doc__ = func.__doc__
        self.__name__ = func.__name__

    def __get__(self, instance, owner):
        if instance is not None:
            return self.func.__get__(instance, owner)
        func = self.func
        def from_class(name, *args, **kwds):
            return func(owner(name), *args, **kwds)
        from_class.__doc__ = func.__doc__
        from_class.__name__ = func.__name__
        return from_class


class Path(object):
    """
    posix    = [ / ] + path/to/somewhere + [ / ]
    windows  = [ c: ] + [ \\ ] + path\\to\\somewhere + [ \\ ]

    A Path is an immutable string in platform-native separator form; every
    manipulation returns a new Path.  Path(...) builds the native flavor,
    PosixPath and WindowsPath may be used directly on any host.

    Every operation also has a class-level form, on Path and on the flavors:

        Path.makedirs('foo/bar')        is   Path('foo/bar').makedirs()
        WindowsPath.sanitize('a//b')    is   WindowsPath('a//b').sanitize()

    Nothing is locked: other processes changing the tree between a check and
    the following action will make these operations fail (or succeed) in
    ways a single process never sees.
    """

    def __new__(cls, value=''):
        value = ospath(value)
        if isinstance(value, _native):
            return value
        return _native(value)

    @classmethod
    def _flavor(cls):
        if cls is Path:
            return _native
        return cls

    @classmethod
    def from_value(cls, value):
        "render value with str() first -- Path(5) is an error, Path.from_value(5) is not"
        if not isinstance(value, str) and hasattr(value, '__fspath__'):
            return cls(value)
        return cls(str(value))

    @classmethod
    def cwd(cls):
        "current working directory, in directory form"
        try:
            current = _os.getcwd()
        except OSError as exc:
            logger.error('unable to determine working directory: %s', exc.strerror)
            current = ''
        return cls(current).directory()

    @classmethod
    def tmp(cls):
        flavor = cls._flavor()
        for name in flavor._TMP_ENV:
            value = _os.environ.get(name)
            if value:
                return cls(value)
        return cls(flavor._TMP_DIR)

    @classmethod
    def join(cls, first, second=None):
        """
        join(a, b)        -> a with b appended
        join(segments)    -> segments joined by the separator
        """
        if isinstance(first, (list, tuple)):
            if second is not None:
                raise ValueError('join either a list of segments or two paths, not %r and %r' % (first, second))
            return cls(cls._flavor()._SEP.join(first))
        return cls(first).append(second)

    @classmethod
    def glob(cls, pattern):
        return cls(pattern).glob()

    @classmethod
    def absolute(cls, name):
        'returns path from root without resolving .. dirs'
        return cls(name).absolute()

    @classmethod
    def sanitize(cls, name):
        return cls(name).sanitize()

    @classmethod
    def equivalent(cls, first, second):
        return cls(first).equivalent(second)

    @classmethod
    def exists(cls, name):
        return cls(name).exists()

    @classmethod
    def is_file(cls, name):
        return cls(name).is_file()

    @classmethod
    def is_directory(cls, name):
        return cls(name).is_directory()

    @classmethod
    def is_link(cls, name):
        return cls(name).is_link()

    @classmethod
    def size(cls, name):
        return cls(name).size()

    @classmethod
    def touch(cls, name, mode=0o777):
        return cls(name).touch(mode)

    @classmethod
    def move(cls, source, dest, mkdirs=False):
        return cls(source).move(dest, mkdirs)

    @classmethod
    def rm(cls, name):
        return cls(name).rm()
    remove = rm

    @classmethod
    def makedirs(cls, subdir, mode=0o777):
        return cls(subdir).makedirs(mode)

    @classmethod
    def rmdirs(cls, subdir, ignore_errors=False):
        return cls(subdir).rmdirs(ignore_errors)

    @classmethod
    def listdir(cls, subdir):
        return cls(subdir).listdir()

    @classmethod
    def recursive_listdir(cls, subdir):
        return cls(subdir).recursive_listdir()


class Methods(object):

    _CUR_DIR = '.'
    _PREV_DIR = '..'
    _EXT_SEP = '.'

    def __new__(cls, value=''):
        value = ospath(value)
        if isinstance(value, cls):
            return value
        value = str(value)
        if cls._ALT_SEP:
            value = value.replace(cls._ALT_SEP, cls._SEP)
        return str.__new__(cls, value)

    @property
    def filename(self):
        'everything after the last separator'
        return str(self)[self.rfind(self._SEP)+1:]

    @property
    def extension(self):
        'extension of the filename, without the dot'
        name = self.filename
        pos = name.rfind(self._EXT_SEP)
        if pos == -1:
            return ''
        return name[pos+1:]

    @property
    def stem(self):
        'the path minus its final extension'
        sep_pos = self.rfind(self._SEP)
        dot_pos = self.rfind(self._EXT_SEP)
        if dot_pos == -1 or dot_pos < sep_pos:
            return self
        return self.__class__(str(self)[:dot_pos])

    @property
    def parent(self):
        'see up()'
        return self.up()

    def __add__(self, other):
        if not isinstance(other, str):
            return NotImplemented
        return self.__class__(str(self) + str(other))

    def __radd__(self, other):
        if not isinstance(other, str):
            return NotImplemented
        return self.__class__(str(other) + str(self))

    def __truediv__(self, other):
        if not isinstance(other, str) and not hasattr(other, '__fspath__'):
            return NotImplemented
        return self.append(other)

    def __rtruediv__(self, other):
        if not isinstance(other, str) and not hasattr(other, '__fspath__'):
            return NotImplemented
        return self.__class__(other).append(self)

    # == and hash() are those of str: exact buffers, no separator folding

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, str(self))

    def string(self):
        return str(self)

    def split(self, sep=None, maxsplit=-1):
        """
        path segments in order; a trailing separator adds a final empty
        segment, an empty path has none

        Without arguments this is NOT str.split(): it splits on the path
        separator only, never on whitespace, and returns Segments.  With
        arguments it is plain str.split, so library code that treats a Path
        as a str keeps working.
        """
        if sep is not None or maxsplit != -1:
            return str.split(self, sep, maxsplit)
        if not self:
            return []
        return [Segment(s) for s in str.split(self, self._SEP)]

    def trailing_slash(self):
        return bool(self) and self[-1] in self._SEPS

    def append(self, segment):
        "add segment after exactly one separator"
        segment = self.__class__(segment)
        value = str(self)
        if not self.trailing_slash():
            value += self._SEP
        return self.__class__(value + str(segment))

    def relative(self, rel):
        "evaluate rel against this path; an absolute rel wins outright"
        rel = self.__class__(rel)
        if rel.is_absolute():
            return rel
        return self.append(rel)

    @classform
    def absolute(self):
        if self.is_absolute():
            return self
        return self.join(self.cwd(), self)

    def up(self):
        if not self:
            return self.__class__(self._PREV_DIR).directory()
        result = self.append(self._PREV_DIR).sanitize()
        if not result:
            return result
        return result.directory()

    @classform
    def sanitize(self):
        """
        resolve '.', '..' and runs of separators

        An absolute path stays absolute and swallows any '..' past its root;
        a relative path keeps the '..'s it has no parents for.  A trailing
        separator survives unless nothing else does.
        """
        segments = self.split()
        relative = not self.is_absolute()
        was_directory = self.trailing_slash()
        pruned = []
        for pos, segment in enumerate(segments):
            if not segment or segment == self._CUR_DIR:
                continue
            if pos and self._is_drive(segment):
                # a drive in the middle of a path is meaningless
                continue
            if segment == self._PREV_DIR:
                if relative:
                    if pruned and pruned[-1] != self._PREV_DIR:
                        pruned.pop()
                    else:
                        pruned.append(segment)
                elif pruned and not self._is_drive(pruned[-1]):
                    pruned.pop()
                continue
            pruned.append(segment)
        value = self._SEP.join(pruned)
        if not relative:
            value = self._ROOT + value
        result = self.__class__(value)
        if was_directory and result:
            result = result.directory()
        return result

    def directory(self):
        "trailing separator, exactly one"
        result = self.trim()
        if not result.trailing_slash():
            result += self._SEP
        return result

    def trim(self):
        "remove trailing separators, but never the root"
        anchor = self._anchor()
        value = str(self).rstrip(self._SEPS)
        if len(value) < len(anchor):
            value = anchor
        return self.__class__(value)

    @classform
    def equivalent(self, other):
        "True if both paths name the same location once made absolute and sanitized"
        this = str(self.absolute().sanitize())
        that = str(self.__class__(other).absolute().sanitize())
        if self._CASE_FOLD:
            this, that = this.lower(), that.lower()
        return this == that

    def _stat(self):
        try:
            return _os.stat(self)
        except (OSError, ValueError):
            return None

    @classform
    def exists(self):
        return self._stat() is not None

    @classform
    def is_file(self):
        result = self._stat()
        return result is not None and _stat.S_ISREG(result.st_mode)

    @classform
    def is_directory(self):
        result = self._stat()
        return result is not None and _stat.S_ISDIR(result.st_mode)

    @classform
    def is_link(self):
        "True for a symbolic link, whether or not its target exists"
        try:
            result = _os.lstat(self)
        except (OSError, ValueError):
            return False
        return _stat.S_ISLNK(result.st_mode)

    @classform
    def size(self):
        "size in bytes, 0 if it cannot be stat'd"
        result = self._stat()
        if result is None:
            return 0
        return result.st_size

    @classform
    def glob(self, pattern=None):
        if pattern is None:
            pattern = self
        elif self:
            pattern = self.append(pattern)
        return [self.__class__(p) for p in native_glob(str(pattern))]

    @classform
    def listdir(self):
        """
        absolute paths of the entries in this directory, in no particular order

        a missing or unreadable directory lists as empty
        """
        base = self.absolute()
        try:
            names = native_listdir(base)
        except OSError as exc:
            logger.debug('unable to list %r: %s', str(base), exc.strerror)
            return []
        return [
                base.relative(name)
                for name in names
                if name not in (self._CUR_DIR, self._PREV_DIR)
                ]

    @classform
    def recursive_listdir(self):
        """
        every file and directory below this one, in no particular order

        symbolic links are listed but never followed
        """
        results = []
        to_visit = [self]
        while to_visit:
            current = to_visit.pop()
            for entry in current.listdir():
                results.append(entry)
                if entry.is_directory() and not entry.is_link():
                    to_visit.append(entry)
        return results

    @classform
    def makedirs(self, mode=0o777):
        """
        Create this directory and any missing ancestors.

        Returns True if the directory exists afterwards; an existing file of
        the same name is a failure.
        """
        target = self.absolute()
        try:
            _os.mkdir(target, mode)
            return True
        except OSError as exc:
            if exc.errno == _errno.EEXIST:
                return target.is_directory()
            elif exc.errno != _errno.ENOENT:
                logger.error('unable to create %r: %s', str(target), exc.strerror)
                return False
        parent = target.parent
        if parent == target:
            logger.error('unable to create %r: root does not exist', str(target))
            return False
        logger.debug('creating missing ancestors of %r', str(target))
        parent.makedirs(mode)
        try:
            _os.mkdir(target, mode)
        except OSError as exc:
            logger.error('unable to create %r: %s', str(target), exc.strerror)
            return False
        return True

    @classform
    def rmdirs(self, ignore_errors=False):
        """
        Remove this path and everything below it, deepest entries first.

        Stops at the first failure unless ignore_errors is set, in which case
        the result is that of the last removal.  Nothing already removed is
        put back.  A symbolic link is removed itself; its target is left alone.
        """
        contents = self.recursive_listdir()
        contents.append(self)
        # longer paths first, so children go before their parents
        contents.sort(key=lambda p: len(p.absolute()), reverse=True)
        success = True
        for entry in contents:
            try:
                if entry.is_directory() and not entry.is_link():
                    _os.rmdir(entry)
                else:
                    _os.unlink(entry)
                success = True
            except OSError as exc:
                success = False
                if not ignore_errors:
                    logger.error('unable to remove %r: %s', str(entry), exc.strerror)
                    break
                logger.debug('ignoring failure to remove %r: %s', str(entry), exc.strerror)
        return success

    @classform
    def move(self, dest, mkdirs=False):
        "rename to dest, creating dest's parent first if mkdirs and it is missing"
        dest = self.__class__(dest)
        try:
            _os.rename(self, dest)
            return True
        except OSError as exc:
            if exc.errno != _errno.ENOENT or not mkdirs:
                logger.debug('unable to move %r to %r: %s', str(self), str(dest), exc.strerror)
                return False
        if not _os.path.lexists(self):
            logger.debug('unable to move %r to %r: source does not exist', str(self), str(dest))
            return False
        dest.parent.makedirs()
        try:
            _os.rename(self, dest)
        except OSError as exc:
            logger.error('unable to move %r to %r: %s', str(self), str(dest), exc.strerror)
            return False
        return True

    @classform
    def touch(self, mode=0o777):
        "create the file if it does not exist, along with any missing directories"
        flags = _os.O_RDONLY | _os.O_CREAT
        try:
            fd = _os.open(self, flags, mode)
        except OSError as exc:
            if exc.errno != _errno.ENOENT:
                logger.error('unable to touch %r: %s', str(self), exc.strerror)
                return False
            self.parent.makedirs(mode)
            try:
                fd = _os.open(self, flags, mode)
            except OSError as exc:
                logger.error('unable to touch %r: %s', str(self), exc.strerror)
                return False
        try:
            _os.close(fd)
        except OSError as exc:
            logger.error('unable to close %r: %s', str(self), exc.strerror)
            return False
        return True

    @classform
    def rm(self):
        "thin wrapper around os.remove"
        try:
            _os.remove(self)
        except OSError as exc:
            logger.error('unable to remove %r: %s', str(self), exc.strerror)
            return False
        return True
    remove = rm


class PosixPath(Methods, Path, str):
    _SEP = '/'
    _ALT_SEP = None
    _SEPS = '/'
    _ROOT = '/'
    _CASE_FOLD = False
    _TMP_ENV = ('TMPDIR', )
    _TMP_DIR = '/tmp'

    def is_absolute(self):
        return self[:1] == self._SEP

    def _anchor(self):
        if self.is_absolute():
            return self._SEP
        return ''

    def _is_drive(self, segment):
        return False


class WindowsPath(Methods, Path, str):
    _SEP = '\\'
    _ALT_SEP = '/'
    _SEPS = '\\/'
    _ROOT = ''
    _DRIVE_SEP = ':'
    _CASE_FOLD = True
    _TMP_ENV = ('TEMP', 'TMP')
    _TMP_DIR = 'C:\\Windows\\Temp'

    def is_absolute(self):
        return self[1:2] == self._DRIVE_SEP

    def _anchor(self):
        if self.is_absolute() and self[2:3] == self._SEP:
            return str(self)[:3]
        return ''

    def _is_drive(self, segment):
        return segment.is_drive_letter


_native = WindowsPath if _is_win else PosixPath


def ospath(thing):
    "str form of a str or path-like object"
    if isinstance(thing, str):
        return thing
    try:
        value = thing.__fspath__()
    except AttributeError:
        raise TypeError('%r must be a str or path-like object, not %r' % (thing, type(thing)))
    if not isinstance(value, str):
        raise TypeError('%r must be a str path, not %r' % (thing, type(value)))
    return value
