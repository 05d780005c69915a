import pytest

from mcusim.core.register import Register, RegisterFile, RegisterSnapshot


def test_register_masks_writes_to_8_bits():
    reg = Register("PORTA", 0x00)
    reg.write(0x1AB)
    assert reg.read() == 0xAB


def test_register_reset_restores_reset_value():
    reg = Register("DDRA", 0x03, reset_value=0x0F)
    reg.write(0xFF)
    reg.reset()
    assert reg.read() == 0x0F


def test_register_snapshot_fields():
    reg = Register("UDR", 0x0A, description="USART data register")
    reg.write(0x41)
    snap = reg.snapshot()
    assert snap == RegisterSnapshot("UDR", 0x0A, 0x41, "USART data register")
    assert snap.to_dict() == {
        "name": "UDR",
        "address": 0x0A,
        "value": 0x41,
        "description": "USART data register",
    }


def test_register_file_add_duplicate_address():
    rf = RegisterFile()
    rf.add(Register("PORTA", 0x00))

    with pytest.raises(ValueError):
        rf.add(Register("OTHER", 0x00))


def test_register_file_write_masks_known_address():
    rf = RegisterFile()
    rf.add(Register("PORTB", 0x01))

    assert rf.write(0x01, 0x1FF) is True
    assert rf.read(0x01) == 0xFF


@pytest.mark.parametrize("value", [0, 1, 0x7F, 0x80, 0xFF, 0x100, 0x1234, -1])
def test_register_file_always_stores_masked_value(value):
    rf = RegisterFile()
    rf.add(Register("PORTA", 0x00))
    rf.write(0x00, value)
    assert rf.read(0x00) == value & 0xFF


def test_register_file_unknown_address_is_ignored():
    rf = RegisterFile()
    reg = Register("PORTA", 0x00)
    rf.add(reg)
    before = rf.snapshot()

    assert rf.write(0x42, 0xAA) is False
    assert rf.snapshot() == before
    assert rf.read(0x42) == 0


def test_register_file_non_integer_input_is_ignored():
    rf = RegisterFile()
    rf.add(Register("PORTA", 0x00))

    assert rf.write("nope", 1) is False
    assert rf.write(0x00, None) is False
    assert rf.read(None) == 0
    assert rf.read(0x00) == 0


def test_register_file_float_value_is_truncated():
    rf = RegisterFile()
    rf.add(Register("PORTA", 0x00))
    rf.write(0x00, 300.7)
    assert rf.read(0x00) == 300 & 0xFF


def test_register_file_reset_find_and_iteration():
    rf = RegisterFile()
    porta = Register("PORTA", 0x00)
    ddra = Register("DDRA", 0x03, reset_value=0x0F)
    rf.add(porta)
    rf.add(ddra)
    rf.write(0x00, 0x55)
    rf.write(0x03, 0x00)

    rf.reset()

    assert rf.read(0x00) == 0x00
    assert rf.read(0x03) == 0x0F
    assert rf.find("DDRA") is ddra
    assert rf.find("MISSING") is None
    assert rf.get_register(0x00) is porta
    assert [r.name for r in rf] == ["PORTA", "DDRA"]
    assert len(rf) == 2
