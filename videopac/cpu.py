"""The 8048 processor of the Odyssey2: registers, stack, interrupts and timing."""

from __future__ import annotations

from typing import Optional

from .opcodes import execute

LINE_CYCLES = 21
RAM_SIZE = 64
ROM_SIZE = 0x1000
STACK_BOTTOM = 8
STACK_TOP = 23
EXT_IRQ_VECTOR = 0x03
TIMER_IRQ_VECTOR = 0x07
INT_PULSE_CYCLES = 5
TIMER_PRESCALE = 31
BANK_SELECT = 0x800


class Bus:
    """Connects the processor to the rest of the machine.

    The default bus has nothing attached beyond port 1, a 256-byte external
    RAM and the four expander nibbles; machines override what they wire up.
    """

    def __init__(self) -> None:
        self.p1 = 0xFF
        self.ext_ram = bytearray(256)
        self.expander = bytearray(4)
        self.counter_overflows = 0

    def in_bus(self) -> int:
        """Value read by INS A,BUS."""
        return 0xFF

    def read_p2(self) -> int:
        """Value read from port 2."""
        return 0xFF

    def write_p1(self, value: int) -> None:
        """Latch a new value on port 1."""
        self.p1 = value & 0xFF

    def read_pb(self, port: int) -> int:
        """Read expander port P4..P7 (0..3)."""
        return self.expander[port & 3]

    def write_pb(self, port: int, value: int) -> None:
        """Write expander port P4..P7 (0..3)."""
        self.expander[port & 3] = value & 0x0F

    def ext_read(self, address: int) -> int:
        """MOVX read from external memory."""
        return self.ext_ram[address & 0xFF]

    def ext_write(self, data: int, address: int) -> None:
        """MOVX write to external memory."""
        self.ext_ram[address & 0xFF] = data & 0xFF

    def read_t1(self) -> bool:
        """Level of test input T1."""
        return False

    def voice_status(self) -> bool:
        """Level of test input T0, driven by the voice unit."""
        return False

    def line_interrupt(self) -> bool:
        """Whether the end of a scan line raises the external interrupt."""
        return False

    def counting_enabled(self) -> bool:
        """Whether the event counter counts scan lines right now."""
        return True

    def counter_overflow(self) -> None:
        """Called when the line counter wraps to zero; the default bus counts these."""
        self.counter_overflows += 1


class Cpu8048:
    """State of an 8048 and the bookkeeping around each instruction."""

    def __init__(self, rom: Optional[bytes] = None, bus: Optional[Bus] = None,
                 line_cycles: int = LINE_CYCLES) -> None:
        data = bytes(rom or b"")
        self.rom = bytearray(data) + bytearray(max(0, ROM_SIZE - len(data)))
        self.bus = bus if bus is not None else Bus()
        self.line_cycles = line_cycles
        self.ram = bytearray(RAM_SIZE)
        self.acc = 0
        self.psw = 0
        self.itimer = 0
        self.t_flag = 0
        self.f1 = 0
        self.int_clk = 0
        self.pending_irq = False
        self.lastpc = 0
        self.clk = 0
        self.master_clk = 0
        self.h_clk = 0
        self.clk_counter = 0
        self.master_count = 0
        self.reset()

    @property
    def p1(self) -> int:
        return self.bus.p1

    @p1.setter
    def p1(self, value: int) -> None:
        self.bus.p1 = value & 0xFF

    def reset(self) -> None:
        """Put the processor in its reset state; RAM and the accumulator are kept."""
        self.pc = 0
        self.sp = STACK_BOTTOM
        self.bs = 0
        self.p1 = 0xFF
        self.p2 = 0xFF
        self.ac = self.cy = self.f0 = 0
        self.a11 = self.a11ff = 0
        self.timer_on = 0
        self.count_on = 0
        self.reg_pnt = 0
        self.tirq_en = self.xirq_en = self.irq_ex = 0
        self.xirq_pend = self.tirq_pend = 0

    def push(self, value: int) -> None:
        """Push a byte on the stack in internal RAM; the stack wraps within 8..23."""
        self.ram[self.sp] = value & 0xFF
        self.sp += 1
        if self.sp > STACK_TOP:
            self.sp = STACK_BOTTOM

    def pull(self) -> int:
        """Pop a byte from the stack."""
        self.sp -= 1
        if self.sp < STACK_BOTTOM:
            self.sp = STACK_TOP
        return self.ram[self.sp]

    def make_psw(self) -> None:
        """Rebuild the program status word from the flags and stack pointer."""
        self.psw = ((self.cy << 7) | self.ac | self.f0 | self.bs | 0x08
                    | ((self.sp - STACK_BOTTOM) >> 1)) & 0xFF

    def _interrupt(self, kind: int, vector: int) -> None:
        self.irq_ex = kind
        self.clk += 2
        self.make_psw()
        self.push(self.pc & 0xFF)
        self.push(((self.pc & 0xF00) >> 8) | (self.psw & 0xF0))
        self.pc = vector
        self.a11ff = self.a11
        self.a11 = 0

    def ext_irq(self) -> None:
        """Pulse the /INT line, taking the external interrupt if it is enabled."""
        self.int_clk = INT_PULSE_CYCLES
        if self.xirq_en and not self.irq_ex:
            self.xirq_pend = 0
            self._interrupt(1, EXT_IRQ_VECTOR)
        if self.pending_irq and not self.xirq_en:
            self.xirq_pend = 1

    def tim_irq(self) -> None:
        """Raise the timer/counter interrupt if it is enabled."""
        if self.tirq_en and not self.irq_ex:
            self.tirq_pend = 0
            self._interrupt(2, TIMER_IRQ_VECTOR)
        if self.pending_irq and not self.tirq_en:
            self.tirq_pend = 1

    def _tick_timer(self) -> bool:
        self.itimer = (self.itimer + 1) & 0xFF
        if self.itimer == 0:
            self.t_flag = 1
            self.tim_irq()
            return True
        return False

    def step(self) -> int:
        """Execute one instruction with its timer and interrupt effects; return its cycles."""
        self.clk = 0
        self.lastpc = self.pc
        opcode = self.rom[self.pc & 0xFFF]
        self.pc = (self.pc + 1) & 0xFFFF
        cycles = execute(self, opcode)
        self.clk = cycles

        self.master_clk += cycles
        self.h_clk += cycles
        self.clk_counter += cycles

        self.int_clk = self.int_clk - cycles if self.int_clk > cycles else 0

        if self.xirq_pend:
            self.ext_irq()
        if self.tirq_pend:
            self.tim_irq()

        if self.h_clk > self.line_cycles - 1:
            self.h_clk -= self.line_cycles
            if self.bus.line_interrupt():
                self.ext_irq()
            if self.count_on and self.bus.counting_enabled():
                if self._tick_timer():
                    self.bus.counter_overflow()

        if self.timer_on:
            self.master_count += cycles
            if self.master_count > TIMER_PRESCALE:
                self.master_count -= TIMER_PRESCALE
                self._tick_timer()

        return cycles