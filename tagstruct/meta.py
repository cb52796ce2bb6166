import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Record: the declaration lives in the class,
    the value (a plain python object) in the instance."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        # accessing from the class returns the declaration
        if instance is None:
            return self.field

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("zero value for field named '%s'", self.field.name)
            data[self.field.name] = self.field.zero()

        return data[self.field.name]

    def __set__(self, instance, value):
        if not self.field.writable:
            raise AttributeError(
                f"field '{self.field.name}' of {instance.__class__.__name__} is read-only")

        instance.__dict__[self.field.name] = value


class FieldBase(object):

    def contribute_to_record(self, cls, name):
        if not getattr(cls, name, None):
            setattr(cls, name, FieldDescriptor(self, name))
        else:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')


class Meta(object):
    """Class containing metadata about the record"""

    def __init__(self):
        self.fields = []
        self.declarations = {}

    def add_field(self, name, field):
        self.fields.append(name)
        self.declarations[name] = field


class MetaRecord(type):

    def __new__(cls, names, bases, attrs):
        '''The fields are collected in declaration order, the way Django does for its models.'''
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaRecord)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                # a base shared by more parents (diamond) contributes its fields once
                if obj_name in new_cls._meta.declarations:
                    continue

                obj = parent.__dict__[obj_name]
                setattr(new_cls, obj_name, obj)
                new_cls._meta.add_field(obj_name, obj.field)

        for obj_name, obj in attrs.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        if hasattr(value, 'contribute_to_record'):
            logger.debug('contribute_to_record() found for field \'%s\'', name)
            value.contribute_to_record(cls, name)
            cls._meta.add_field(name, value)
        else:
            setattr(cls, name, value)
