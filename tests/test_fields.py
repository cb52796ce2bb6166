import pytest

from tagstruct.core import Record
from tagstruct.enum import Kind
from tagstruct import fields


def test_record_meta():
    """Check that the fields are collected in the order of declaration."""
    class Dummy(Record):
        c = fields.UInt8()
        a = fields.Int32()
        b = fields.String(tag='len:4')

    class Dummy2(Record):
        field = fields.Bool()

    assert Dummy._meta.fields == ['c', 'a', 'b']
    assert Dummy2._meta.fields == ['field']
    assert [_ for _, __ in Dummy().get_fields()] == ['c', 'a', 'b']
    # from the class we obtain the declaration
    assert isinstance(Dummy.a, fields.Int32)
    assert Dummy.a.name == 'a'
    assert Dummy.b.tag == 'len:4'


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Record):
        field_a = fields.UInt8()
        field_b = fields.UInt16()

    class Son(Father):
        field_c = fields.String(tag='len:2')

    assert Son._meta.fields == ['field_a', 'field_b', 'field_c']

    son = Son(b'\x01\x02\x00AB')

    assert son.field_a == 1
    assert son.field_b == 2
    assert son.field_c == 'AB'


def test_diamond_inheritance():
    '''a base shared by two parents contributes its fields once'''
    class Base(Record):
        field_a = fields.UInt8()

    class Left(Base):
        field_b = fields.UInt8()

    class Right(Base):
        field_c = fields.UInt8()

    class Child(Left, Right):
        pass

    assert Child._meta.fields == ['field_a', 'field_b', 'field_c']

    child = Child(b'\x01\x02\x03')

    assert child.as_dict() == {'field_a': 1, 'field_b': 2, 'field_c': 3}


def test_redeclaration_is_an_error():
    class Father(Record):
        field_a = fields.UInt8()

    with pytest.raises(AttributeError):
        class Son(Father):
            field_a = fields.UInt16()


def test_zero_values():
    class Inner(Record):
        value = fields.UInt32()

    class Dummy(Record):
        i = fields.Int()
        u = fields.UInt64()
        f = fields.Float32()
        d = fields.Float64()
        b = fields.Bool()
        s = fields.String()
        sl = fields.Slice(fields.UInt8())
        ar = fields.Array(fields.UInt16(), 3)
        st = fields.Struct(Inner)
        op = fields.Opaque()

    dummy = Dummy()

    assert dummy.i == 0
    assert dummy.u == 0
    assert dummy.f == 0.0
    assert dummy.d == 0.0
    assert dummy.b is False
    assert dummy.s == ''
    assert dummy.sl == []
    assert dummy.ar == [0, 0, 0]
    assert dummy.st == Inner()
    assert dummy.st.value == 0
    assert dummy.op is None


def test_instances_dont_share_values():
    class Dummy(Record):
        items = fields.Slice(fields.UInt8())

    first, second = Dummy(), Dummy()
    first.items.append(1)

    assert second.items == []


def test_keyword_initialization_and_equality():
    class Dummy(Record):
        a = fields.UInt8()
        b = fields.String()

    assert Dummy(a=1, b='x') == Dummy(a=1, b='x')
    assert Dummy(a=1, b='x') != Dummy(a=2, b='x')
    assert Dummy(a=1).as_dict() == {'a': 1, 'b': ''}
    assert repr(Dummy(a=1)) == "<Dummy(a=1,b='')>"

    with pytest.raises(TypeError):
        Dummy(c=3)


def test_records_are_not_hashable():
    class Dummy(Record):
        a = fields.UInt8()

    with pytest.raises(TypeError):
        hash(Dummy(a=1))

    with pytest.raises(TypeError):
        {Dummy(a=1)}


def test_readonly_field():
    class Dummy(Record):
        hidden = fields.UInt8(readonly=True)

    dummy = Dummy()

    assert Dummy.hidden.writable is False
    assert dummy.hidden == 0

    with pytest.raises(AttributeError):
        dummy.hidden = 1


def test_kinds_and_widths():
    assert fields.Int().kind == Kind.INT
    assert fields.Int().width is None
    assert fields.Int16().width == 2
    assert fields.UInt64().kind == Kind.UINT
    assert fields.UInt64().width == 8
    assert fields.Float64().kind == Kind.FLOAT64
    assert fields.Array(fields.Bool(), 2).kind == Kind.ARRAY
    assert fields.Opaque().kind == Kind.OPAQUE


def test_type_names():
    class Inner(Record):
        pass

    assert fields.UInt8().type_name() == 'UInt8'
    assert fields.Slice(fields.UInt8()).type_name() == 'Slice[UInt8]'
    assert fields.Array(fields.Int32(), 4).type_name() == 'Array[Int32, 4]'
    assert fields.Struct(Inner).type_name() == 'Struct[Inner]'


def test_accepts():
    assert fields.Int32().accepts(-1)
    assert not fields.Int32().accepts(True)
    assert not fields.UInt32().accepts(-1)
    assert fields.Float32().accepts(1)
    assert not fields.String().accepts(b'bytes')
    assert fields.Array(fields.UInt8(), 2).accepts([1, 2])
    assert not fields.Array(fields.UInt8(), 2).accepts([1])
    assert fields.Opaque().accepts(object())


def test_accepts_type():
    class Inner(Record):
        pass

    class Derived(Inner):
        pass

    assert fields.Int32().accepts_type(int)
    assert not fields.Int32().accepts_type(bool)
    assert not fields.UInt8().accepts_type(str)
    assert fields.Float64().accepts_type(int)
    assert fields.Bool().accepts_type(bool)
    assert not fields.String().accepts_type(bytes)
    assert fields.Array(fields.UInt8(), 2).accepts_type(list)
    assert fields.Struct(Inner).accepts_type(Derived)
    assert not fields.Struct(Derived).accepts_type(Inner)
    assert fields.Opaque().accepts_type(object)


def test_invalid_declarations():
    with pytest.raises(ValueError):
        fields.Struct(int)

    with pytest.raises(ValueError):
        fields.Slice(int)

    with pytest.raises(ValueError):
        fields.Array(fields.UInt8(), -1)
