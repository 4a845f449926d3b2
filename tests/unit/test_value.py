from dbcall.value import Value


def test_get_set():
    """Test a cell holds one value at a time"""
    cell = Value()
    assert cell.get() is None
    cell.set(42)
    assert cell.get() == 42
    cell.set(None)
    assert cell.get() is None


def test_identity_equality():
    """Test cells compare and hash by identity, not contents"""
    a, b = Value('x'), Value('x')
    assert a != b
    assert a == a
    assert len({a, b}) == 2


def test_rendering():
    assert str(Value(5)) == '5'
    assert str(Value()) == 'None'
    assert repr(Value('hi')) == "Value('hi')"


if __name__ == '__main__':
    __import__('pytest').main([__file__])
