"""The system control co-processor: status, exceptions and address mapping."""

from __future__ import annotations

from enum import IntEnum

_WORD_MASK = 0xFFFFFFFF

_STATUS_READ_MASK = 0xF27FFF3F
_CAUSE_READ_MASK = 0xB000FF7C
_STATUS_KEEP_MASK = 0x0DB400C0
_STATUS_WRITE_MASK = 0xF24BFF3F
_CAUSE_KEEP_MASK = 0xFFFFFCFF
_CAUSE_WRITE_MASK = 0x00000300

_BEV = 0x00400000
_CACHE_MISS = 0x00080000
_ISOLATE_CACHE = 0x00010000
_REVERSE_ENDIAN = 0x02000000
_USER_MODE = 0x2

RESET_VECTOR = 0xBFC00000
BOOT_EXCEPTION_VECTOR = 0xBFC00180
GENERAL_EXCEPTION_VECTOR = 0x80000080
PRID_VALUE = 0x00000002

KSEG0 = 0x80000000
KSEG1 = 0xA0000000
KSEG2 = 0xC0000000


class CopRegister(IntEnum):
    """Register numbers with special meaning."""

    RANDOM = 1
    BAD_VADDR = 8
    STATUS = 12
    CAUSE = 13
    EPC = 14
    PRID = 15


class Cop0:
    """Co-processor 0 state.

    Register values and addresses are handled as unsigned 32-bit integers;
    inputs are reduced modulo 2**32, so negative values are accepted.
    """

    def __init__(self) -> None:
        self.registers = [0] * 32
        self.condition_line = False
        self.reset()

    def reset(self) -> None:
        """Apply the effect of the reset exception."""
        self.registers[CopRegister.RANDOM] = 63 << 8
        status = self.registers[CopRegister.STATUS]
        status &= 0xFF9FFFFF  # BEV and TS cleared
        status &= 0xFFFDFFFC  # SwC, KUc and IEc cleared
        self.registers[CopRegister.STATUS] = status
        self.condition_line = False

    def rfe(self) -> None:
        """Return from exception: pop the interrupt/mode stack."""
        status = self.read_reg(CopRegister.STATUS)
        popped = (status >> 2) & 0xF
        status = (status & 0xFFFFFFF0) | popped
        self.write_reg(CopRegister.STATUS, status, False)

    def reset_exception_vector(self) -> int:
        """Virtual address of the reset exception vector."""
        return RESET_VECTOR

    def general_exception_vector(self) -> int:
        """Virtual address of the general exception vector, chosen by BEV."""
        if self.registers[CopRegister.STATUS] & _BEV:
            return BOOT_EXCEPTION_VECTOR
        return GENERAL_EXCEPTION_VECTOR

    def read_reg(self, reg: int) -> int:
        """Read a register as software sees it; unknown registers read 0."""
        if reg == CopRegister.STATUS:
            return self.registers[reg] & _STATUS_READ_MASK
        if reg == CopRegister.CAUSE:
            return self.registers[reg] & _CAUSE_READ_MASK
        if reg == CopRegister.PRID:
            return PRID_VALUE
        if reg in (CopRegister.EPC, CopRegister.BAD_VADDR, CopRegister.RANDOM):
            return self.registers[reg]
        return 0

    def write_reg(self, reg: int, value: int, override: bool) -> None:
        """Write a register, honouring read-only bits unless overridden."""
        value &= _WORD_MASK
        if override:
            self.registers[reg] = value
        elif reg == CopRegister.STATUS:
            kept = self.registers[reg] & _STATUS_KEEP_MASK
            self.registers[reg] = (value & _STATUS_WRITE_MASK) | kept
        elif reg == CopRegister.CAUSE:
            kept = self.registers[reg] & _CAUSE_KEEP_MASK
            self.registers[reg] &= (value & _CAUSE_WRITE_MASK) | kept
        else:
            self.registers[reg] = value

    def set_cache_miss(self, value: bool) -> None:
        """Set or clear the cache miss flag in the status register."""
        status = self.registers[CopRegister.STATUS] & ~_CACHE_MISS & _WORD_MASK
        if value:
            status |= _CACHE_MISS
        self.write_reg(CopRegister.STATUS, status, True)

    def virtual_to_physical(self, virtual_address: int) -> int:
        """Translate a virtual address with the fixed segment map."""
        address = virtual_address & _WORD_MASK
        if KSEG0 <= address < KSEG1:
            return address - KSEG0
        if KSEG1 <= address < KSEG2:
            return address - KSEG1
        return address

    def is_cacheable(self, virtual_address: int) -> bool:
        """Tell whether an address lies in a cached segment (kuseg or kseg0)."""
        return (virtual_address & _WORD_MASK) < KSEG1

    def in_kernel_mode(self) -> bool:
        """Tell whether the processor is currently in kernel mode."""
        return not self.registers[CopRegister.STATUS] & _USER_MODE

    def user_mode_opposite_byte_ordering(self) -> bool:
        """Tell whether reverse endianness is in effect in user mode."""
        return bool(self.registers[CopRegister.STATUS] & _REVERSE_ENDIAN)

    def is_address_allowed(self, virtual_address: int) -> bool:
        """Tell whether an address may be accessed in the current mode."""
        return not (virtual_address & KSEG0) or self.in_kernel_mode()

    def caches_swapped(self) -> bool:
        """Cache swapping is not supported, so this is always False."""
        return False

    def data_cache_isolated(self) -> bool:
        """Tell whether the data cache is isolated."""
        return bool(self.registers[CopRegister.STATUS] & _ISOLATE_CACHE)

    def is_coprocessor_usable(self, cop_num: int) -> bool:
        """Tell whether co-processor ``cop_num`` is marked usable."""
        usable = self.registers[CopRegister.STATUS] >> 28
        return (usable >> cop_num) & 0x1 == 1