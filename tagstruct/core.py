"""
Core module: the records and the engine decoding them
"""
import logging
from typing import Dict, List, Tuple

from .fields import Field
from .enum import Kind
from .meta import MetaRecord, Endianess
from .streams import Reader
from .directives import FieldDirective
from .delegation import NO_VALUE, resolve_delegate, unresolved_message
from .exceptions import (
    BindingException,
    InvalidTargetException,
    SeekException,
    TagstructException,
    UnresolvedDelegateException,
    UnsupportedKindException,
)


logger = logging.getLogger(__name__)


class Record(metaclass=MetaRecord):
    """
    Base class for the definition of a format: the fields are declared as class
    attributes and are decoded in the order of declaration (fields of the parent
    classes first).

    Passing a source of data (bytes, a path, a file or a Reader) to the constructor
    the record is decoded from it immediately, the keyword arguments instead set
    the initial value of the fields.

    Records compare equal when their fields have the same values; being mutable
    they are not hashable.
    """

    def __init__(self, source=None, endianess=Endianess.LITTLE_ENDIAN, **kwargs):
        for name, value in kwargs.items():
            if name not in self._meta.declarations:
                raise TypeError(f'{self.__class__.__name__} has no field named \'{name}\'')

            setattr(self, name, value)

        if source is not None:
            reader = source if isinstance(source, Reader) else Reader(source, endianess=endianess)
            logger.debug('unpacking \'%s\' from %r', self.__class__.__name__, reader)
            unpack(self, reader)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, field declaration) for each field.'''
        return [(_, self._meta.declarations[_]) for _ in self.get_ordered_fields_name()]

    def as_dict(self) -> Dict[str, object]:
        return {_: getattr(self, _) for _ in self.get_ordered_fields_name()}

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented

        return self.as_dict() == other.as_dict()

    __hash__ = None

    def __repr__(self):
        msg = []
        for field_name in self.get_ordered_fields_name():
            msg.append('%s=%r' % (field_name, getattr(self, field_name)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name in self.get_ordered_fields_name():
            msg += '%s: %r\n' % (field_name, getattr(self, field_name))
        return msg


class Unpacker(object):
    '''Walks the fields of a record, and recursively of its sub-records, decoding
    them from the reader.

    The ancestors are the records containing the one being decoded, outermost first:
    they are used only to look for the methods indicated in the tags.'''

    def __init__(self, reader: Reader):
        self.reader = reader
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")

    def unpack(self, record: Record, ancestors: Tuple[Record, ...] = ()):
        for field_name, field in record.get_fields():
            self.logger.debug('unpacking %s.%s at 0x%x', record.__class__.__name__, field_name, self.reader.tell())

            try:
                directive = field.directive(record)
                value = self.unpack_field(
                    record, field, directive, ancestors, getattr(record, field_name), field.writable)
            except TagstructException as e:
                e.chain.insert(0, field_name)
                raise

            if field.writable:
                setattr(record, field_name, value)

        return record

    def seek(self, directive: FieldDirective):
        for seek in directive.seeks:
            try:
                self.reader.seek(seek.offset, seek.whence)
            except SeekException as e:
                raise SeekException(f'seek failed: {e.message}') from e

    def unpack_field(self, record, field, directive, ancestors, current, writable):
        '''It returns the value to assign to the field, current is the value the field
        has now (and it's returned as is when there is nothing to decode).'''
        if directive.ignore:
            return current

        self.seek(directive)

        if directive.delegate:
            matched, value = resolve_delegate(directive.delegate, record, ancestors, field, self.reader)

            if not matched:
                raise UnresolvedDelegateException(unresolved_message(directive.delegate, record, field))

            return current if value is NO_VALUE else value

        method = getattr(self, 'unpack_%s' % field.kind.name.lower(), None) if field.kind else None

        if method is None:
            kind_name = field.kind.name.lower() if field.kind else field.__class__.__name__
            raise UnsupportedKindException(f'type \'{kind_name}\' not supported')

        return method(record, field, directive, ancestors, current, writable)

    @staticmethod
    def check_length(length):
        if length < 0:
            raise BindingException(f'length cannot be negative ({length})')

    def resolve_width(self, field, directive):
        # the first matching wins: the length is not checked against the type
        for width in (1, 2, 4, 8):
            if directive.length == width or field.width == width:
                return width

        prefix = 'UInt' if field.kind == Kind.UINT else 'Int'
        raise BindingException(
            f'need set tag with len or use {prefix}8/{prefix}16/{prefix}32/{prefix}64')

    def unpack_int(self, record, field, directive, ancestors, current, writable):
        width = self.resolve_width(field, directive)
        return getattr(self.reader, 'read_int%d' % (width * 8))()

    def unpack_uint(self, record, field, directive, ancestors, current, writable):
        width = self.resolve_width(field, directive)
        return getattr(self.reader, 'read_uint%d' % (width * 8))()

    def unpack_float32(self, record, field, directive, ancestors, current, writable):
        return self.reader.read_float32()

    def unpack_float64(self, record, field, directive, ancestors, current, writable):
        return self.reader.read_float64()

    def unpack_bool(self, record, field, directive, ancestors, current, writable):
        return self.reader.read_bool()

    def unpack_string(self, record, field, directive, ancestors, current, writable):
        if directive.length is None:
            raise BindingException('need set tag with len for string')

        self.check_length(directive.length)

        _, data = self.reader.read_bytes(directive.length)

        try:
            return data.decode(field.encoding)
        except UnicodeDecodeError as e:
            raise BindingException(f'cannot decode {data!r} as {field.encoding}') from e

    def unpack_element(self, record, field, directive, ancestors, index):
        try:
            return self.unpack_field(record, field.element, directive, ancestors, field.element.zero(), True)
        except TagstructException as e:
            e.chain.insert(0, f'[{index}]')
            raise

    def unpack_slice(self, record, field, directive, ancestors, current, writable):
        if directive.length is None:
            raise BindingException('need set tag with len for slice')

        self.check_length(directive.length)

        # read-only fields are decoded anyway but in a list thrown away
        values = current if writable else list(current)
        element_directive = field.element_directive(directive, record)

        for index in range(directive.length):
            values.append(self.unpack_element(record, field, element_directive, ancestors, index))

        return values

    def unpack_array(self, record, field, directive, ancestors, current, writable):
        length = directive.length or field.size

        self.check_length(length)

        if length > field.size:
            raise BindingException(f'length {length} exceeds the size of the array ({field.size})')

        values = current if writable else list(current)
        element_directive = field.element_directive(directive, record)

        for index in range(length):
            values[index] = self.unpack_element(record, field, element_directive, ancestors, index)

        return values

    def unpack_struct(self, record, field, directive, ancestors, current, writable):
        nested = current if writable and isinstance(current, field.record_cls) else field.zero()

        return self.unpack(nested, ancestors + (record,))


def unpack(record, reader):
    '''Decodes the record from the reader (or from any source a Reader accepts)
    and returns it.

    If something goes wrong an exception is raised with the chain of field names
    that brings to the failing one; the fields decoded until that point keep
    their new values.'''
    if record is None:
        raise InvalidTargetException('tagstruct: unpack(None)')

    if isinstance(record, type):
        raise InvalidTargetException(f'tagstruct: unpack(class {record.__name__}), an instance is needed')

    if not isinstance(record, Record):
        raise InvalidTargetException(f'tagstruct: unpack(non-record {record.__class__.__name__})')

    if not isinstance(reader, Reader):
        reader = Reader(reader)

    return Unpacker(reader).unpack(record)
