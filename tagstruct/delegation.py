"""
Decoding of the fields that indicate in their tag the name of a method.

The method is searched first in the record being decoded and then in the records
containing it, from the nearest to the outermost, so that a method can be shared
by all the sub-records of a format. It must accept the reader as the only argument
and it can have two shapes

    def read_checksum(self, reader) -> None:
        ...  # it reads and sets whatever it wants, raising in case of failure

    def read_checksum(self, reader) -> int:
        ...  # the returned value is assigned to the field

The shape is decided by the return annotation when present, otherwise a method
returning None is considered of the first kind.
"""
import inspect
import logging

from .exceptions import DelegateException, TagstructException
from .streams import Reader


logger = logging.getLogger(__name__)


# returned in place of the value for the methods that don't return anything
NO_VALUE = object()


def find_routine(candidate, name, field):
    '''Returns the bound method with the given name if it has a compatible
    signature, otherwise None.

    A method annotated as returning a class the field cannot hold is not
    compatible, so the search goes on with the records containing it.'''
    routine = getattr(candidate, name, None)

    if routine is None or not callable(routine):
        return None

    try:
        signature = inspect.signature(routine)
    except (TypeError, ValueError):
        return None

    parameters = list(signature.parameters.values())

    if len(parameters) != 1:
        return None

    parameter = parameters[0]

    if parameter.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
        return None

    annotation = parameter.annotation
    if annotation is not inspect.Parameter.empty and inspect.isclass(annotation) \
            and not issubclass(Reader, annotation):
        return None

    returns = signature.return_annotation
    if returns is not inspect.Signature.empty and inspect.isclass(returns) \
            and not field.accepts_type(returns):
        logger.debug('method \'%s\' of %s returns %s, not assignable to %s',
                     name, candidate.__class__.__name__, returns.__name__, field.type_name())
        return None

    return routine


def call_routine(routine, name, field, reader):
    try:
        value = routine(reader)
    except TagstructException:
        raise
    except Exception as e:
        raise DelegateException(f"method '{name}' failed: {e!r}") from e

    returns = inspect.signature(routine).return_annotation

    if returns is None or returns == 'None':
        return NO_VALUE

    if value is None and returns is inspect.Signature.empty:
        return NO_VALUE

    # annotated methods are checked before the call, this catches the others
    # and the ones returning something else than declared
    if not field.accepts(value):
        raise DelegateException(
            f"method '{name}' returned {value!r} that is not assignable to {field.type_name()}")

    return value


def resolve_delegate(name, record, ancestors, field, reader):
    '''It returns a couple (matched, value) where value is NO_VALUE if
    the method doesn't return anything.'''
    for candidate in (record, *reversed(ancestors)):
        routine = find_routine(candidate, name, field)

        if routine is None:
            logger.debug('no method \'%s\' in %s', name, candidate.__class__.__name__)
            continue

        logger.debug('calling %s.%s()', candidate.__class__.__name__, name)

        return True, call_routine(routine, name, field, reader)

    return False, NO_VALUE


def unresolved_message(name, record, field) -> str:
    return (
        f"failed to call method, expected methods:\n"
        f"    def {name}(self, reader: Reader) -> None\n"
        f"or\n"
        f"    def {name}(self, reader: Reader) -> {field.type_name()}\n"
        f"in {record.__class__.__name__} or in the records containing it"
    )
