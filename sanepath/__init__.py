version = 0, 1, 0

from .path import *
from . import path as _path

__all__ = _path.__all__
