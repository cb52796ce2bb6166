"""
# Tagstruct: declarative decoding of binary formats.

A binary format is described as a record, i.e. a class with a field for each
component, in the order they appear into the data:

    class Entry(Record):
        kind  = fields.UInt8()
        value = fields.Int(tag='len:2')

    class Header(Record):
        magic   = fields.String(tag='len:4')
        count   = fields.UInt16()
        entries = fields.Slice(fields.Struct(Entry), tag='len:count')
        crc     = fields.UInt32(tag='offset_end:-4')

    header = unpack(Header(), Reader(data))

Each field can have a tag that indicates

 1. its length (for strings and sequences, or the width of a generic integer)
 2. where to seek before decoding it
 3. that it must be ignored
 4. the name of a method of the record (or of one of the records containing it)
    that decodes the field when the declaration alone is not enough

The decoding is sequential and follows the declaration: a record is either fully
decoded or an exception is raised, carrying the path of the field that failed.
"""
from .core import Record, Unpacker, unpack
from .enum import Kind, Whence
from .meta import Endianess
from .streams import Reader
from .directives import FieldDirective, Seek
from . import fields
from .exceptions import (
    TagstructException,
    InvalidTargetException,
    DirectiveException,
    BindingException,
    ReaderException,
    SeekException,
    EndOfDataException,
    InvalidSourceException,
    UnresolvedDelegateException,
    UnsupportedKindException,
    DelegateException,
)
