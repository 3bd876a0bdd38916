"""Instruction set of the 8048 microcontroller at the heart of the Odyssey2.

``execute`` runs one instruction whose opcode has already been fetched, so
``cpu.pc`` points at the byte after the opcode.  It returns the number of
machine cycles the instruction took.

The ``cpu`` object carries the processor state as attributes:

``acc``, ``pc``, ``psw``, ``sp``, ``p1``, ``p2``, ``itimer``, ``reg_pnt``,
``timer_on``, ``count_on``, ``t_flag``, ``tirq_pend``, ``a11``, ``a11ff``,
``bs``, ``f0``, ``f1``, ``ac``, ``cy``, ``xirq_en``, ``tirq_en``, ``irq_ex``,
``int_clk``, ``ram`` (internal RAM), ``rom`` (program memory) and ``bus``.
It also provides the stack operations ``push(value)`` and ``pull()`` and
``make_psw()``, which rebuilds ``psw`` from the flags.

``cpu.bus`` connects the processor to the rest of the machine through
``in_bus()``, ``read_p2()``, ``write_p1(value)``, ``read_pb(port)``,
``write_pb(port, value)``, ``ext_read(address)``,
``ext_write(data, address)``, ``read_t1()`` and ``voice_status()``.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, NamedTuple, Optional

log = logging.getLogger(__name__)

__all__ = ["execute"]


class _Instruction(NamedTuple):
    run: Optional[Callable[[Any], None]]
    cycles: int


def _unimplemented(cpu: Any, opcode: int) -> None:
    log.warning("unimplemented instruction %x, %x", opcode, cpu.pc)


# NOP and the illegal opcodes change no state; they only take one cycle.
_TABLE: list[_Instruction] = [_Instruction(None, 1) for _ in range(256)]


def _op(code: int, cycles: int, **kwargs: int) -> Callable[[Callable[..., None]], Callable[..., None]]:
    def register(func: Callable[..., None]) -> Callable[..., None]:
        _TABLE[code] = _Instruction(partial(func, **kwargs) if kwargs else func, cycles)
        return func
    return register


def execute(cpu: Any, opcode: int) -> int:
    """Execute one already fetched instruction and return its cycle count."""
    instruction = _TABLE[opcode & 0xFF]
    if instruction.run is not None:
        instruction.run(cpu)
    return instruction.cycles


# Helpers

def _rom(cpu: Any, address: int) -> int:
    return cpu.rom[address & 0xFFF]


def _advance(cpu: Any) -> None:
    cpu.pc = (cpu.pc + 1) & 0xFFFF


def _immediate(cpu: Any) -> int:
    value = _rom(cpu, cpu.pc)
    _advance(cpu)
    return value


def _indirect(cpu: Any, r: int) -> int:
    return cpu.ram[cpu.reg_pnt + r] & 0x3F


def _add(cpu: Any, value: int, carry: int) -> None:
    cpu.ac = 0x40 if (cpu.acc & 0x0F) + (value & 0x0F) + carry > 0x0F else 0
    total = cpu.acc + value + carry
    cpu.cy = 1 if total > 0xFF else 0
    cpu.acc = total & 0xFF


def _branch(cpu: Any, condition: Any) -> None:
    target = _rom(cpu, cpu.pc)
    if condition:
        cpu.pc = (cpu.pc & 0xF00) | target
    else:
        _advance(cpu)


def _call(cpu: Any, target: int) -> None:
    cpu.push(cpu.pc & 0xFF)
    cpu.push(((cpu.pc & 0xF00) >> 8) | (cpu.psw & 0xF0))
    cpu.pc = target


def _load_flags(cpu: Any, value: int) -> None:
    cpu.cy = (value & 0x80) >> 7
    cpu.ac = value & 0x40
    cpu.f0 = value & 0x20
    cpu.bs = value & 0x10
    cpu.reg_pnt = 24 if cpu.bs else 0


# Page jumps, calls and bit tests: one opcode for each of eight pages or bits.

def _jmp(cpu: Any, page: int) -> None:
    cpu.pc = _rom(cpu, cpu.pc) | page | cpu.a11


def _call_page(cpu: Any, page: int) -> None:
    cpu.make_psw()
    target = _rom(cpu, cpu.pc) | page | cpu.a11
    _advance(cpu)
    _call(cpu, target)


def _jb(cpu: Any, mask: int) -> None:
    _branch(cpu, cpu.acc & mask)


for _n in range(8):
    _op(0x04 + 0x20 * _n, 2, page=_n << 8)(_jmp)
    _op(0x14 + 0x20 * _n, 2, page=_n << 8)(_call_page)
    _op(0x12 + 0x20 * _n, 2, mask=1 << _n)(_jb)


# Register operations: one opcode for each of R0..R7.

def _inc_reg(cpu: Any, r: int) -> None:
    i = cpu.reg_pnt + r
    cpu.ram[i] = (cpu.ram[i] + 1) & 0xFF


def _xch_reg(cpu: Any, r: int) -> None:
    i = cpu.reg_pnt + r
    cpu.acc, cpu.ram[i] = cpu.ram[i], cpu.acc


def _orl_reg(cpu: Any, r: int) -> None:
    cpu.acc |= cpu.ram[cpu.reg_pnt + r]


def _anl_reg(cpu: Any, r: int) -> None:
    cpu.acc &= cpu.ram[cpu.reg_pnt + r]


def _add_reg(cpu: Any, r: int) -> None:
    _add(cpu, cpu.ram[cpu.reg_pnt + r], 0)


def _addc_reg(cpu: Any, r: int) -> None:
    _add(cpu, cpu.ram[cpu.reg_pnt + r], cpu.cy)


def _mov_reg_a(cpu: Any, r: int) -> None:
    cpu.ram[cpu.reg_pnt + r] = cpu.acc


def _mov_reg_imm(cpu: Any, r: int) -> None:
    cpu.ram[cpu.reg_pnt + r] = _immediate(cpu)


def _dec_reg(cpu: Any, r: int) -> None:
    i = cpu.reg_pnt + r
    cpu.ram[i] = (cpu.ram[i] - 1) & 0xFF


def _xrl_reg(cpu: Any, r: int) -> None:
    cpu.acc ^= cpu.ram[cpu.reg_pnt + r]


def _djnz(cpu: Any, r: int) -> None:
    i = cpu.reg_pnt + r
    cpu.ram[i] = (cpu.ram[i] - 1) & 0xFF
    _branch(cpu, cpu.ram[i] != 0)


def _mov_a_reg(cpu: Any, r: int) -> None:
    cpu.acc = cpu.ram[cpu.reg_pnt + r]


for _r in range(8):
    _op(0x18 + _r, 1, r=_r)(_inc_reg)
    _op(0x28 + _r, 1, r=_r)(_xch_reg)
    _op(0x48 + _r, 1, r=_r)(_orl_reg)
    _op(0x58 + _r, 1, r=_r)(_anl_reg)
    _op(0x68 + _r, 1, r=_r)(_add_reg)
    _op(0x78 + _r, 1, r=_r)(_addc_reg)
    _op(0xA8 + _r, 1, r=_r)(_mov_reg_a)
    _op(0xB8 + _r, 2, r=_r)(_mov_reg_imm)
    _op(0xC8 + _r, 1, r=_r)(_dec_reg)
    _op(0xD8 + _r, 1, r=_r)(_xrl_reg)
    _op(0xE8 + _r, 2, r=_r)(_djnz)
    _op(0xF8 + _r, 1, r=_r)(_mov_a_reg)


# Indirect operations through R0 or R1.

def _inc_ind(cpu: Any, r: int) -> None:
    i = _indirect(cpu, r)
    cpu.ram[i] = (cpu.ram[i] + 1) & 0xFF


def _xch_ind(cpu: Any, r: int) -> None:
    i = _indirect(cpu, r)
    cpu.acc, cpu.ram[i] = cpu.ram[i], cpu.acc


def _xchd_ind(cpu: Any, r: int) -> None:
    i = _indirect(cpu, r)
    low = cpu.acc & 0x0F
    cpu.acc = (cpu.acc & 0xF0) | (cpu.ram[i] & 0x0F)
    cpu.ram[i] = (cpu.ram[i] & 0xF0) | low


def _orl_ind(cpu: Any, r: int) -> None:
    cpu.acc |= cpu.ram[_indirect(cpu, r)]


def _anl_ind(cpu: Any, r: int) -> None:
    cpu.acc &= cpu.ram[_indirect(cpu, r)]


def _add_ind(cpu: Any, r: int) -> None:
    _add(cpu, cpu.ram[_indirect(cpu, r)], 0)


def _addc_ind(cpu: Any, r: int) -> None:
    _add(cpu, cpu.ram[_indirect(cpu, r)], cpu.cy)


def _movx_read(cpu: Any, r: int) -> None:
    cpu.acc = cpu.bus.ext_read(cpu.ram[cpu.reg_pnt + r]) & 0xFF


def _movx_write(cpu: Any, r: int) -> None:
    cpu.bus.ext_write(cpu.acc, cpu.ram[cpu.reg_pnt + r])


def _mov_ind_a(cpu: Any, r: int) -> None:
    cpu.ram[_indirect(cpu, r)] = cpu.acc


def _mov_ind_imm(cpu: Any, r: int) -> None:
    i = _indirect(cpu, r)
    cpu.ram[i] = _immediate(cpu)


def _xrl_ind(cpu: Any, r: int) -> None:
    cpu.acc ^= cpu.ram[_indirect(cpu, r)]


def _mov_a_ind(cpu: Any, r: int) -> None:
    cpu.acc = cpu.ram[_indirect(cpu, r)]


for _r in range(2):
    _op(0x10 + _r, 1, r=_r)(_inc_ind)
    _op(0x20 + _r, 1, r=_r)(_xch_ind)
    _op(0x30 + _r, 1, r=_r)(_xchd_ind)
    _op(0x40 + _r, 1, r=_r)(_orl_ind)
    _op(0x50 + _r, 1, r=_r)(_anl_ind)
    _op(0x60 + _r, 1, r=_r)(_add_ind)
    _op(0x70 + _r, 1, r=_r)(_addc_ind)
    _op(0x80 + _r, 2, r=_r)(_movx_read)
    _op(0x90 + _r, 2, r=_r)(_movx_write)
    _op(0xA0 + _r, 1, r=_r)(_mov_ind_a)
    _op(0xB0 + _r, 2, r=_r)(_mov_ind_imm)
    _op(0xD0 + _r, 1, r=_r)(_xrl_ind)
    _op(0xF0 + _r, 1, r=_r)(_mov_a_ind)


# Expander ports P4..P7 on the Videopac+.

def _movd_read(cpu: Any, port: int) -> None:
    cpu.acc = cpu.bus.read_pb(port) & 0xFF


def _movd_write(cpu: Any, port: int) -> None:
    cpu.bus.write_pb(port, cpu.acc)


def _orld(cpu: Any, port: int) -> None:
    cpu.bus.write_pb(port, cpu.bus.read_pb(port) | cpu.acc)


def _anld(cpu: Any, port: int) -> None:
    cpu.bus.write_pb(port, cpu.bus.read_pb(port) & cpu.acc)


for _p in range(4):
    _op(0x0C + _p, 2, port=_p)(_movd_read)
    _op(0x3C + _p, 2, port=_p)(_movd_write)
    _op(0x8C + _p, 2, port=_p)(_orld)
    _op(0x9C + _p, 2, port=_p)(_anld)


# Instructions the emulation leaves out.

for _code, _cycles in ((0x02, 2), (0x75, 1), (0x88, 2), (0x98, 2)):
    _op(_code, _cycles, opcode=_code)(_unimplemented)


# Single instructions.

_TABLE[0x00] = _Instruction(None, 1)  # NOP


@_op(0x03, 2)
def _add_imm(cpu: Any) -> None:
    cpu.cy = cpu.ac = 0
    _add(cpu, _immediate(cpu), 0)


@_op(0x13, 2)
def _addc_imm(cpu: Any) -> None:
    _add(cpu, _immediate(cpu), cpu.cy)


@_op(0x05, 1)
def _en_i(cpu: Any) -> None:
    cpu.xirq_en = 1


@_op(0x15, 1)
def _dis_i(cpu: Any) -> None:
    cpu.xirq_en = 0


@_op(0x25, 1)
def _en_tcnti(cpu: Any) -> None:
    cpu.tirq_en = 1


@_op(0x35, 1)
def _dis_tcnti(cpu: Any) -> None:
    cpu.tirq_en = 0
    cpu.tirq_pend = 0


@_op(0x07, 1)
def _dec_a(cpu: Any) -> None:
    cpu.acc = (cpu.acc - 1) & 0xFF


@_op(0x17, 1)
def _inc_a(cpu: Any) -> None:
    cpu.acc = (cpu.acc + 1) & 0xFF


@_op(0x27, 1)
def _clr_a(cpu: Any) -> None:
    cpu.acc = 0


@_op(0x37, 1)
def _cpl_a(cpu: Any) -> None:
    cpu.acc ^= 0xFF


@_op(0x08, 2)
def _ins_bus(cpu: Any) -> None:
    cpu.acc = cpu.bus.in_bus() & 0xFF


@_op(0x09, 2)
def _in_p1(cpu: Any) -> None:
    cpu.acc = cpu.p1


@_op(0x0A, 2)
def _in_p2(cpu: Any) -> None:
    cpu.acc = cpu.bus.read_p2() & 0xFF


@_op(0x39, 2)
def _outl_p1(cpu: Any) -> None:
    cpu.bus.write_p1(cpu.acc)


@_op(0x3A, 2)
def _outl_p2(cpu: Any) -> None:
    cpu.p2 = cpu.acc


@_op(0x89, 2)
def _orl_p1(cpu: Any) -> None:
    cpu.bus.write_p1(cpu.p1 | _immediate(cpu))


@_op(0x8A, 2)
def _orl_p2(cpu: Any) -> None:
    cpu.p2 |= _immediate(cpu)


@_op(0x99, 2)
def _anl_p1(cpu: Any) -> None:
    cpu.bus.write_p1(cpu.p1 & _immediate(cpu))


@_op(0x9A, 2)
def _anl_p2(cpu: Any) -> None:
    cpu.p2 &= _immediate(cpu)


@_op(0x16, 2)
def _jtf(cpu: Any) -> None:
    _branch(cpu, cpu.t_flag)
    cpu.t_flag = 0


@_op(0x23, 2)
def _mov_a_imm(cpu: Any) -> None:
    cpu.acc = _immediate(cpu)


@_op(0x43, 2)
def _orl_imm(cpu: Any) -> None:
    cpu.acc |= _immediate(cpu)


@_op(0x53, 2)
def _anl_imm(cpu: Any) -> None:
    cpu.acc &= _immediate(cpu)


@_op(0xD3, 2)
def _xrl_imm(cpu: Any) -> None:
    cpu.acc ^= _immediate(cpu)


@_op(0x26, 2)
def _jnt0(cpu: Any) -> None:
    _branch(cpu, not cpu.bus.voice_status())


@_op(0x36, 2)
def _jt0(cpu: Any) -> None:
    _branch(cpu, cpu.bus.voice_status())


@_op(0x46, 2)
def _jnt1(cpu: Any) -> None:
    _branch(cpu, not cpu.bus.read_t1())


@_op(0x56, 2)
def _jt1(cpu: Any) -> None:
    _branch(cpu, cpu.bus.read_t1())


@_op(0x76, 2)
def _jf1(cpu: Any) -> None:
    _branch(cpu, cpu.f1)


@_op(0xB6, 2)
def _jf0(cpu: Any) -> None:
    _branch(cpu, cpu.f0)


@_op(0x86, 2)
def _jni(cpu: Any) -> None:
    _branch(cpu, cpu.int_clk > 0)


@_op(0x96, 2)
def _jnz(cpu: Any) -> None:
    _branch(cpu, cpu.acc != 0)


@_op(0xC6, 2)
def _jz(cpu: Any) -> None:
    _branch(cpu, cpu.acc == 0)


@_op(0xE6, 2)
def _jnc(cpu: Any) -> None:
    _branch(cpu, not cpu.cy)


@_op(0xF6, 2)
def _jc(cpu: Any) -> None:
    _branch(cpu, cpu.cy)


@_op(0x42, 1)
def _mov_a_t(cpu: Any) -> None:
    cpu.acc = cpu.itimer


@_op(0x62, 1)
def _mov_t_a(cpu: Any) -> None:
    cpu.itimer = cpu.acc


@_op(0x45, 1)
def _strt_cnt(cpu: Any) -> None:
    cpu.count_on = 1


@_op(0x55, 1)
def _strt_t(cpu: Any) -> None:
    cpu.timer_on = 1


@_op(0x65, 1)
def _stop_tcnt(cpu: Any) -> None:
    cpu.count_on = cpu.timer_on = 0


@_op(0x47, 1)
def _swap(cpu: Any) -> None:
    cpu.acc = ((cpu.acc << 4) | (cpu.acc >> 4)) & 0xFF


@_op(0x57, 1)
def _da(cpu: Any) -> None:
    if (cpu.acc & 0x0F) > 0x09 or cpu.ac:
        if cpu.acc > 0xF9:
            cpu.cy = 1
        cpu.acc = (cpu.acc + 6) & 0xFF
    high = (cpu.acc & 0xF0) >> 4
    if high > 9 or cpu.cy:
        high += 6
        cpu.cy = 1
    cpu.acc = ((cpu.acc & 0x0F) | (high << 4)) & 0xFF


@_op(0x67, 1)
def _rrc(cpu: Any) -> None:
    carry = cpu.cy
    cpu.cy = cpu.acc & 0x01
    cpu.acc = (cpu.acc >> 1) | (0x80 if carry else 0)


@_op(0x77, 1)
def _rr(cpu: Any) -> None:
    cpu.acc = (cpu.acc >> 1) | (0x80 if cpu.acc & 0x01 else 0)


@_op(0xE7, 1)
def _rl(cpu: Any) -> None:
    cpu.acc = ((cpu.acc << 1) & 0xFF) | (0x01 if cpu.acc & 0x80 else 0)


@_op(0xF7, 1)
def _rlc(cpu: Any) -> None:
    carry = cpu.cy
    cpu.cy = (cpu.acc & 0x80) >> 7
    cpu.acc = ((cpu.acc << 1) & 0xFF) | (0x01 if carry else 0)


@_op(0x83, 2)
def _ret(cpu: Any) -> None:
    high = (cpu.pull() & 0x0F) << 8
    cpu.pc = high | cpu.pull()


@_op(0x93, 2)
def _retr(cpu: Any) -> None:
    saved = cpu.pull()
    _load_flags(cpu, saved)
    cpu.pc = ((saved & 0x0F) << 8) | cpu.pull()
    cpu.irq_ex = 0
    cpu.a11 = cpu.a11ff


@_op(0x85, 1)
def _clr_f0(cpu: Any) -> None:
    cpu.f0 = 0


@_op(0x95, 1)
def _cpl_f0(cpu: Any) -> None:
    cpu.f0 ^= 0x20


@_op(0xA5, 1)
def _clr_f1(cpu: Any) -> None:
    cpu.f1 = 0


@_op(0xB5, 1)
def _cpl_f1(cpu: Any) -> None:
    cpu.f1 ^= 0x01


@_op(0x97, 1)
def _clr_c(cpu: Any) -> None:
    cpu.cy = 0


@_op(0xA7, 1)
def _cpl_c(cpu: Any) -> None:
    cpu.cy ^= 0x01


@_op(0xA3, 2)
def _movp(cpu: Any) -> None:
    cpu.acc = _rom(cpu, (cpu.pc & 0xF00) | cpu.acc)


@_op(0xE3, 2)
def _movp3(cpu: Any) -> None:
    cpu.acc = _rom(cpu, 0x300 | cpu.acc)


@_op(0xB3, 2)
def _jmpp(cpu: Any) -> None:
    page = cpu.pc & 0xF00
    cpu.pc = page | _rom(cpu, page | cpu.acc)


@_op(0xC5, 1)
def _sel_rb0(cpu: Any) -> None:
    cpu.bs = cpu.reg_pnt = 0


@_op(0xD5, 1)
def _sel_rb1(cpu: Any) -> None:
    cpu.bs = 0x10
    cpu.reg_pnt = 24


@_op(0xC7, 1)
def _mov_a_psw(cpu: Any) -> None:
    cpu.make_psw()
    cpu.acc = cpu.psw


@_op(0xD7, 1)
def _mov_psw_a(cpu: Any) -> None:
    cpu.psw = cpu.acc
    _load_flags(cpu, cpu.psw)
    cpu.sp = ((cpu.psw & 0x07) << 1) + 8


@_op(0xE5, 1)
def _sel_mb0(cpu: Any) -> None:
    cpu.a11 = 0
    cpu.a11ff = 0


@_op(0xF5, 1)
def _sel_mb1(cpu: Any) -> None:
    # Inside an interrupt the bank switch takes effect on return.
    if not cpu.irq_ex:
        cpu.a11 = 0x800
    cpu.a11ff = 0x800