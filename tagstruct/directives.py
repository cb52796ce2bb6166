"""
The directive is the structured version of the tag of a field, with all the
expressions already evaluated against the record being decoded.

It's rebuilt each time a field is decoded since the expressions can depend on
the values of fields decoded just before.
"""
import logging
from typing import List, Optional

from .enum import Whence
from .exceptions import DirectiveException
from .tags import parse_tag


logger = logging.getLogger(__name__)


class Seek(object):

    def __init__(self, offset: int, whence: Whence = Whence.START):
        self.offset = offset
        self.whence = whence

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.offset}, {self.whence.name})>'

    def __eq__(self, other):
        return isinstance(other, Seek) and (self.offset, self.whence) == (other.offset, other.whence)


class FieldDirective(object):

    def __init__(self, ignore=False, length=None, delegate=None, seeks=None, element=None):
        self.ignore: bool = ignore
        self.length: Optional[int] = length
        self.delegate: Optional[str] = delegate
        self.seeks: List[Seek] = seeks if seeks is not None else []
        self.element: Optional["FieldDirective"] = element

    def __repr__(self):
        return '<%s(ignore=%s, length=%s, delegate=%s, seeks=%r, element=%r)>' % (
            self.__class__.__name__,
            self.ignore,
            self.length,
            self.delegate,
            self.seeks,
            self.element,
        )


def build_directive(items, record) -> FieldDirective:
    directive = FieldDirective()

    for item in items:
        if item.kind == 'ignore':
            directive.ignore = True
        elif item.kind == 'length':
            directive.length = item.value.evaluate(record)
        elif item.kind == 'seek':
            directive.seeks.append(Seek(item.value.evaluate(record), item.whence))
        elif item.kind == 'element':
            directive.element = build_directive(item.value, record)
        elif item.kind == 'delegate':
            directive.delegate = item.value
        else:
            raise DirectiveException(f'unknown item {item!r}')

    return directive


def resolve_directive(tag: str, record) -> FieldDirective:
    '''Parse the tag and evaluate it with respect to the record passed as argument.'''
    directive = build_directive(parse_tag(tag), record)

    logger.debug('tag \'%s\' resolved as %r', tag, directive)

    return directive
