"""
Parsing of the tag of a field, i.e. the string describing how to decode it.

The tag is a comma separated list of items

    -                   don't decode the field at all
    len:<expr>          length (bytes for strings, elements for sequences, width for integers)
    offset:<expr>       seek relative to the actual position before decoding
    offset_start:<expr> seek from the start of the data
    offset_end:<expr>   seek from the end of the data
    [<items>]           directive for each element of a sequence
    <name>              name of the method of the record that decodes the field

where an expression can use integers, names of fields of the record being decoded
(also dotted like "header.count"), parentheses and the operators + - * / %.

For example

    items = fields.Slice(fields.UInt16(), tag='len:count*2,offset_start:0x10')

The parsing of a tag is cached since depends only on its text; the expressions are
evaluated each time against the record being decoded.
"""
import logging
from functools import lru_cache
from typing import Tuple

from lark import Lark, Transformer, Token
from lark.exceptions import LarkError, VisitError

from .enum import Whence
from .exceptions import DirectiveException


logger = logging.getLogger(__name__)


tag_grammar = r"""
    start: [item ("," item)*]

    ?item: "-"                   -> ignore
         | "len" ":" expr        -> length
         | "offset" ":" expr     -> offset
         | "offset_start" ":" expr -> offset_start
         | "offset_end" ":" expr -> offset_end
         | "[" start "]"         -> element
         | NAME                  -> delegate

    ?expr: term
         | expr "+" term         -> add
         | expr "-" term         -> sub

    ?term: factor
         | term "*" factor       -> mul
         | term "/" factor       -> div
         | term "%" factor       -> mod

    ?factor: NUMBER              -> number
           | NAME ("." NAME)*    -> reference
           | "-" factor          -> neg
           | "(" expr ")"

    NUMBER: /0[xX][0-9a-fA-F]+/ | /0[oO][0-7]+/ | /0[bB][01]+/ | /[0-9]+/
    NAME: /[A-Za-z_][A-Za-z_0-9]*/

    %import common.WS
    %ignore WS
"""

tag_parser = Lark(tag_grammar, parser="lalr")


class Expression(object):
    """Base class for the nodes of an expression inside a tag."""

    def evaluate(self, record) -> int:
        raise NotImplementedError(f"method {self.__class__.__name__}.evaluate() not implemented")


class Literal(Expression):

    def __init__(self, value: int):
        self.value = value

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value})>'

    def evaluate(self, record) -> int:
        return self.value


class Reference(Expression):
    '''Value of a field of the record being decoded, like "count" or "header.count".'''

    def __init__(self, path: Tuple[str, ...]):
        self.path = path

    def __repr__(self):
        return f'<{self.__class__.__name__}({".".join(self.path)})>'

    def evaluate(self, record) -> int:
        value = record
        for component_name in self.path:
            try:
                value = getattr(value, component_name)
            except AttributeError as e:
                raise DirectiveException(
                    f"'{'.'.join(self.path)}' doesn't resolve for {record.__class__.__name__}") from e

        # bool is an int but it's surely a mistake
        if not isinstance(value, int) or isinstance(value, bool):
            raise DirectiveException(
                f"'{'.'.join(self.path)}' is {value!r}, an integer is needed")

        logger.debug(' resolved \'%s\' as %d', '.'.join(self.path), value)

        return value


class Negate(Expression):

    def __init__(self, operand: Expression):
        self.operand = operand

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.operand!r})>'

    def evaluate(self, record) -> int:
        return -self.operand.evaluate(record)


class BinaryOperation(Expression):

    operators = {
        '+': lambda a, b: a + b,
        '-': lambda a, b: a - b,
        '*': lambda a, b: a * b,
        '/': lambda a, b: a // b,
        '%': lambda a, b: a % b,
    }

    def __init__(self, operator: str, left: Expression, right: Expression):
        self.operator = operator
        self.left = left
        self.right = right

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.left!r} {self.operator} {self.right!r})>'

    def evaluate(self, record) -> int:
        left = self.left.evaluate(record)
        right = self.right.evaluate(record)

        try:
            return self.operators[self.operator](left, right)
        except ZeroDivisionError as e:
            raise DirectiveException(f'division by zero in {self!r}') from e


class Item(object):
    """A single element of a tag, the kind is one of

     - ignore
     - length
     - seek (with whence)
     - element (with a nested list of items)
     - delegate (with the name of the method)
    """

    def __init__(self, kind, value=None, whence=None):
        self.kind = kind
        self.value = value
        self.whence = whence

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.kind}, {self.value!r})>'


class TagTransformer(Transformer):

    def start(self, items):
        # the optional item produces None when the tag is empty
        return tuple(_ for _ in items if _ is not None)

    def ignore(self, _):
        return Item('ignore')

    def length(self, items):
        return Item('length', items[0])

    def offset(self, items):
        return Item('seek', items[0], whence=Whence.CURRENT)

    def offset_start(self, items):
        return Item('seek', items[0], whence=Whence.START)

    def offset_end(self, items):
        return Item('seek', items[0], whence=Whence.END)

    def element(self, items):
        return Item('element', items[0])

    def delegate(self, items):
        return Item('delegate', str(items[0]))

    def number(self, items: Tuple[Token]):
        token = str(items[0])
        # int(_, 0) doesn't like decimals with leading zeros
        base = 0 if token[:2].lower() in ('0x', '0o', '0b') else 10
        return Literal(int(token, base))

    def reference(self, items: Tuple[Token]):
        return Reference(tuple(str(_) for _ in items))

    def neg(self, items):
        return Negate(items[0])

    def add(self, items):
        return BinaryOperation('+', *items)

    def sub(self, items):
        return BinaryOperation('-', *items)

    def mul(self, items):
        return BinaryOperation('*', *items)

    def div(self, items):
        return BinaryOperation('/', *items)

    def mod(self, items):
        return BinaryOperation('%', *items)


@lru_cache(maxsize=None)
def parse_tag(tag: str) -> Tuple[Item, ...]:
    '''Returns the items of the tag (an empty tuple for an empty tag).'''
    if not tag or not tag.strip():
        return ()

    logger.debug('parsing tag \'%s\'', tag)

    try:
        tree = tag_parser.parse(tag)
        return TagTransformer().transform(tree)
    except VisitError as e:
        raise DirectiveException(f'invalid tag \'{tag}\': {e.orig_exc}') from e
    except LarkError as e:
        raise DirectiveException(f'invalid tag \'{tag}\': {e}') from e
