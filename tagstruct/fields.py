"""
A Field is the declaration of a component of a record: it knows its kind, its tag
and its zero value, the value itself lives in the record instance.

    class Header(Record):
        magic = fields.String(tag='len:4')
        count = fields.UInt16()
        items = fields.Slice(fields.Int32(), tag='len:count')
"""
from .enum import Kind
from .meta import FieldBase
from .directives import FieldDirective, resolve_directive
from .exceptions import DirectiveException


class Field(FieldBase):
    """Base class to subclass from"""

    kind = None

    def __init__(self, tag='', readonly=False):
        super().__init__()
        self.name = None
        self.tag = tag
        self.readonly = readonly

    def __repr__(self):
        if not self.tag:
            return f'<{self.type_name()}>'

        return f'<{self.type_name()}({self.tag!r})>'

    @property
    def writable(self):
        '''Read-only fields are decoded anyway but their value is thrown away.'''
        return not self.readonly

    def type_name(self) -> str:
        return self.__class__.__name__

    def zero(self):
        return None

    def accepts(self, value) -> bool:
        return True

    def accepts_type(self, cls) -> bool:
        '''Tells if a value of the given class can be assigned to the field.'''
        return True

    def directive(self, record) -> FieldDirective:
        if not self.tag:
            return FieldDirective()

        try:
            return resolve_directive(self.tag, record)
        except DirectiveException as e:
            raise DirectiveException(
                f"directive resolution failed for field '{self.name or self.type_name()}': {e.message}") from e


class Int(Field):
    '''Signed integer: without width it needs a tag like "len:4".'''

    kind = Kind.INT
    width = None

    def zero(self):
        return 0

    def accepts(self, value):
        return isinstance(value, int) and not isinstance(value, bool)

    def accepts_type(self, cls):
        return issubclass(cls, int) and not issubclass(cls, bool)


class Int8(Int):
    width = 1


class Int16(Int):
    width = 2


class Int32(Int):
    width = 4


class Int64(Int):
    width = 8


class UInt(Int):
    kind = Kind.UINT

    def accepts(self, value):
        return super().accepts(value) and value >= 0


class UInt8(UInt):
    width = 1


class UInt16(UInt):
    width = 2


class UInt32(UInt):
    width = 4


class UInt64(UInt):
    width = 8


class Float32(Field):
    kind = Kind.FLOAT32

    def zero(self):
        return 0.0

    def accepts(self, value):
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def accepts_type(self, cls):
        return issubclass(cls, (int, float)) and not issubclass(cls, bool)


class Float64(Float32):
    kind = Kind.FLOAT64


class Bool(Field):
    kind = Kind.BOOL

    def zero(self):
        return False

    def accepts(self, value):
        return isinstance(value, bool)

    def accepts_type(self, cls):
        return issubclass(cls, bool)


class String(Field):
    """Text with the length indicated by the tag."""

    kind = Kind.STRING

    def __init__(self, tag='', encoding='utf-8', **kw):
        self.encoding = encoding
        super().__init__(tag=tag, **kw)

    def zero(self):
        return ''

    def accepts(self, value):
        return isinstance(value, str)

    def accepts_type(self, cls):
        return issubclass(cls, str)


class Slice(Field):
    '''Variable number of elements of the same field: the number is
    the length in the tag, the directive for each element can be indicated
    between brackets, like "len:4,[len:2]", otherwise is used the tag of
    the element itself.'''

    kind = Kind.SLICE

    def __init__(self, element, **kw):
        if not isinstance(element, Field):
            raise ValueError(f'element must be a Field, not \'{element.__class__.__name__}\'')
        self.element = element
        super().__init__(**kw)

    def type_name(self):
        return f'{self.__class__.__name__}[{self.element.type_name()}]'

    def zero(self):
        return []

    def accepts(self, value):
        return isinstance(value, list)

    def accepts_type(self, cls):
        return issubclass(cls, list)

    def element_directive(self, directive, record) -> FieldDirective:
        if directive.element is not None:
            return directive.element

        return self.element.directive(record)


class Array(Slice):
    '''Fixed number of elements: the length in the tag is optional and
    can only reduce the number of elements decoded.'''

    kind = Kind.ARRAY

    def __init__(self, element, size, **kw):
        if size < 0:
            raise ValueError(f'size of an Array cannot be negative ({size})')
        self.size = size
        super().__init__(element, **kw)

    def type_name(self):
        return f'{self.__class__.__name__}[{self.element.type_name()}, {self.size}]'

    def zero(self):
        return [self.element.zero() for _ in range(self.size)]

    def accepts(self, value):
        return isinstance(value, list) and len(value) == self.size


class Struct(Field):
    '''Nested record.'''

    kind = Kind.STRUCT

    def __init__(self, record_cls, **kw):
        from .core import Record

        if not (isinstance(record_cls, type) and issubclass(record_cls, Record)):
            raise ValueError(f'\'{record_cls!r}\' is not a subclass of Record')

        self.record_cls = record_cls
        super().__init__(**kw)

    def type_name(self):
        return f'{self.__class__.__name__}[{self.record_cls.__name__}]'

    def zero(self):
        return self.record_cls()

    def accepts(self, value):
        return isinstance(value, self.record_cls)

    def accepts_type(self, cls):
        return issubclass(cls, self.record_cls)


class Opaque(Field):
    '''Any python object: it can be decoded only by a method of the record
    indicated in the tag.'''

    kind = Kind.OPAQUE
