class TagstructException(Exception):
    '''Base class to extend in order to throw exception in tagstruct.

    Besides the message it takes a chain that represents the path of fields
    (outermost first) that caused the exception: every level of the decoding
    prepends its own field name while the exception goes up.
    '''

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    @property
    def path(self):
        path = ''
        for element in self.chain:
            if element.startswith('[') or not path:
                path += element
            else:
                path += '.' + element

        return path

    def __str__(self):
        if not self.chain:
            return self.message

        return f'{self.message} (at {self.path})'


class InvalidTargetException(TagstructException):
    pass


class DirectiveException(TagstructException):
    pass


class BindingException(TagstructException):
    '''The field declaration and its directive don't allow to decode it.'''
    pass


class ReaderException(TagstructException):
    pass


class SeekException(ReaderException):
    pass


class EndOfDataException(ReaderException):
    pass


class InvalidSourceException(ReaderException):
    pass


class UnresolvedDelegateException(TagstructException):
    pass


class UnsupportedKindException(TagstructException):
    pass


class DelegateException(TagstructException):
    '''A delegated routine failed: the original exception is the __cause__.'''
    pass
