import os
from enum import Enum, IntEnum, auto


class Kind(Enum):
    '''The kind of a field drives which decoding is applied to it'''
    INT     = auto()
    UINT    = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    BOOL    = auto()
    STRING  = auto()
    SLICE   = auto()
    ARRAY   = auto()
    STRUCT  = auto()
    OPAQUE  = auto()


class Whence(IntEnum):
    '''Reference point for a seek, the same values of the os module'''
    START   = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END     = os.SEEK_END
