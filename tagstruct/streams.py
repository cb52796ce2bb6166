import copy
import logging

from bitstring import ConstBitStream, ReadError

from .enum import Whence
from .meta import Endianess
from .exceptions import (
    EndOfDataException,
    InvalidSourceException,
    SeekException,
)


logger = logging.getLogger(__name__)


_ORDER_SUFFIX = {
    Endianess.LITTLE_ENDIAN: 'le',
    Endianess.BIG_ENDIAN:    'be',
    Endianess.NETWORK:       'be',
    Endianess.NATIVE:        'ne',
}


class Reader(object):
    '''Sequential and seekable source of bytes: it's a wrapper around a bitstring's
    ConstBitStream that exposes a read method for each primitive type.

    The source can be raw bytes, a path or a binary file object: we normalize it
    calling the method named init_<class name of the source>.

    All the reads advance the cursor by the number of bytes consumed; a read past
    the end of the data raises EndOfDataException and doesn't move the cursor.
    '''

    def __init__(self, obj, endianess=Endianess.LITTLE_ENDIAN):
        self.endianess = endianess
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise InvalidSourceException(
                f'\'{self.obj.__class__.__name__}\' is the wrong kind of source to read from')

        self.stream = init_method()

    def __repr__(self):
        return f'<{self.__class__.__name__}(offset=0x{self.tell():x}, size=0x{self.size:x})>'

    def init_bytes(self):
        return ConstBitStream(bytes=self.obj)

    def init_bytearray(self):
        return ConstBitStream(bytes=bytes(self.obj))

    def init_memoryview(self):
        return ConstBitStream(bytes=self.obj.tobytes())

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'', self.obj)
        return ConstBitStream(filename=self.obj)

    def init_BytesIO(self):
        return ConstBitStream(bytes=self.obj.getvalue())

    def init_BufferedReader(self):
        '''A file opened in binary mode: we start from its actual position'''
        return ConstBitStream(bytes=self.obj.read())

    def init_ConstBitStream(self):
        return self.obj

    def with_order(self, endianess):
        '''Returns a reader sharing the cursor with this one but that decodes
        the numbers using a different byte order.'''
        reader = copy.copy(self)
        reader.endianess = endianess

        return reader

    @property
    def size(self):
        return len(self.stream) // 8

    def tell(self):
        return self.stream.bytepos

    def seek(self, offset, whence=Whence.START):
        '''It returns the new absolute position.'''
        whence = Whence(whence)

        if whence == Whence.START:
            position = offset
        elif whence == Whence.CURRENT:
            position = self.tell() + offset
        else:
            position = self.size + offset

        if position < 0 or position > self.size:
            raise SeekException(
                f'seek to {offset} from {whence.name} lands at {position} outside of [0, {self.size}]')

        logger.debug('seek at 0x%08x (%d from %s)', position, offset, whence.name)
        self.stream.bytepos = position

        return position

    def _read(self, fmt):
        position = self.stream.pos
        try:
            value = self.stream.read(fmt)
        except ReadError as e:
            self.stream.pos = position
            raise EndOfDataException(
                f'cannot read \'{fmt}\' at offset 0x{position // 8:x}: not enough data') from e

        logger.debug('read %s at 0x%08x: %r', fmt, position // 8, value)

        return value

    def _number(self, kind, bits):
        if bits == 8:
            return self._read(f'{kind}:8')

        return self._read(f'{kind}{_ORDER_SUFFIX[self.endianess]}:{bits}')

    def read_int8(self):
        return self._number('int', 8)

    def read_int16(self):
        return self._number('int', 16)

    def read_int32(self):
        return self._number('int', 32)

    def read_int64(self):
        return self._number('int', 64)

    def read_uint8(self):
        return self._number('uint', 8)

    def read_uint16(self):
        return self._number('uint', 16)

    def read_uint32(self):
        return self._number('uint', 32)

    def read_uint64(self):
        return self._number('uint', 64)

    def read_float32(self):
        return self._number('float', 32)

    def read_float64(self):
        return self._number('float', 64)

    def read_byte(self):
        return self.read_uint8()

    def read_bool(self):
        return self.read_uint8() != 0

    def read_bytes(self, n):
        '''It returns the offset where the reading started and the data.'''
        if n < 0:
            raise ValueError(f'cannot read a negative number of bytes ({n})')

        offset = self.tell()
        try:
            data = self.stream.read(n * 8).bytes
        except ReadError as e:
            self.stream.bytepos = offset
            raise EndOfDataException(
                f'cannot read {n} bytes at offset 0x{offset:x}: only {self.size - offset} remaining') from e

        logger.debug('read %d bytes at 0x%08x: %s', n, offset, data.hex())

        return offset, data

    def peek(self, n):
        '''Like read_bytes() but the cursor is not moved.'''
        offset = self.tell()
        try:
            _, data = self.read_bytes(n)
        finally:
            self.stream.bytepos = offset

        return data

    def read_all(self):
        '''Returns all the data from the cursor till the end.'''
        _, data = self.read_bytes(self.size - self.tell())

        return data

    def unpack(self, record):
        '''Decodes the record starting from the actual position, useful inside
        the custom decoding methods of a record.'''
        from .core import unpack

        return unpack(record, self)
