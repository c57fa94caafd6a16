import pytest

from psxcore.cdrom_state import (
    DriveMode,
    DriveStatus,
    bcd_to_int,
    msf_to_position,
)
from psxcore.cue import INITIAL_GAP, MINUTE_BYTES, SECOND_BYTES, SECTOR_BYTES


def test_default_status_has_only_motor_bit():
    assert DriveStatus().code(False) == 0x02


def test_shell_open_sets_its_bit():
    status = DriveStatus()
    assert status.code(True) & 0x10 == 0x10
    assert status.code(False) & 0x10 == 0


@pytest.mark.parametrize(
    "name,bit",
    [
        ("cdda_playing", 0x80),
        ("seeking", 0x40),
        ("reading", 0x20),
        ("id_error", 0x08),
        ("seek_error", 0x04),
        ("command_error", 0x01),
    ],
)
def test_each_status_flag_sets_one_bit(name, bit):
    status = DriveStatus(motor_on=False, **{name: True})
    assert status.code(False) & 0xFF == bit


def test_motor_off_clears_motor_bit():
    assert DriveStatus(motor_on=False).code(False) == 0


def test_all_status_bits_give_signed_minus_one():
    status = DriveStatus(
        cdda_playing=True,
        seeking=True,
        reading=True,
        id_error=True,
        seek_error=True,
        motor_on=True,
        command_error=True,
    )
    code = status.code(True)
    assert code & 0xFF == 0xFF
    assert -128 <= code < 0


def test_status_code_is_signed_byte_range():
    code = DriveStatus(cdda_playing=True).code(False)
    assert -128 <= code <= 127
    assert code < 0


def test_zero_mode_is_default():
    assert DriveMode.from_byte(0) == DriveMode()


@pytest.mark.parametrize(
    "name,bit",
    [
        ("double_speed", 0x80),
        ("xa_adpcm", 0x40),
        ("whole_sector", 0x20),
        ("ignore_bit", 0x10),
        ("xa_filter", 0x08),
        ("report_interrupts", 0x04),
        ("auto_pause", 0x02),
        ("allow_cdda", 0x01),
    ],
)
def test_mode_bits_decode_to_flags(name, bit):
    mode = DriveMode.from_byte(bit)
    assert mode == DriveMode(**{name: True})


def test_mode_accepts_negative_signed_byte():
    assert DriveMode.from_byte(-128) == DriveMode(double_speed=True)


def test_data_sector_geometry():
    mode = DriveMode()
    assert mode.sector_size() == 0x800
    assert mode.sector_skip() == 24


def test_whole_sector_geometry():
    mode = DriveMode.from_byte(0x20)
    assert mode.sector_size() == 0x924
    assert mode.sector_skip() == 12


def test_whole_sector_fits_inside_raw_sector():
    mode = DriveMode(whole_sector=True)
    assert mode.sector_skip() + mode.sector_size() == SECTOR_BYTES


def test_bcd_round_trip_for_all_two_digit_values():
    for number in range(100):
        assert bcd_to_int(int(str(number), 16)) == number


def test_bcd_ignores_bits_above_a_byte():
    assert bcd_to_int(0x100 | 0x45) == bcd_to_int(0x45)


def test_msf_units():
    assert msf_to_position(0, 0, 1) == SECTOR_BYTES
    assert msf_to_position(0, 1, 0) == SECOND_BYTES
    assert msf_to_position(1, 0, 0) == MINUTE_BYTES


def test_msf_two_seconds_is_initial_gap():
    assert msf_to_position(0, 2, 0) == INITIAL_GAP


def test_msf_frames_and_seconds_agree():
    assert msf_to_position(0, 0, 75) == msf_to_position(0, 1, 0)
    assert msf_to_position(0, 60, 0) == msf_to_position(1, 0, 0)


def test_msf_is_additive():
    combined = msf_to_position(3, 7, 11)
    parts = (
        msf_to_position(3, 0, 0)
        + msf_to_position(0, 7, 0)
        + msf_to_position(0, 0, 11)
    )
    assert combined == parts