"""
Tree-walking interpreter for the offset IR.

Pointer policy: the data pointer never goes below zero. A MovePointer that
would make it negative, or an access at ``pointer + offset < 0``, raises
BFPointerError; addresses are never wrapped.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from .capabilities import ReadByte as ReadCapability
from .capabilities import WriteByte as WriteCapability
from .errors import BFInputError, BFOutputError, BFPointerError, BFStepLimitError
from .offsets import Add, Loop, MovePointer, MultiplyAdd, OffsetOp, ReadByte, SetZero, WriteByte
from .state import MachineState
from .tape import MIN_TAPE_SIZE, Tape

logger = logging.getLogger(__name__)


class Engine:
    """
    Executes offset IR against a fresh tape.

    Every executed operation costs one step, and so does every evaluation
    of a loop condition after the first. When ``max_steps`` is set the run
    aborts with BFStepLimitError as soon as the count goes past it.
    """

    def __init__(
        self,
        read_byte: ReadCapability,
        write_byte: WriteCapability,
        *,
        max_steps: Optional[int] = None,
        tape_size: int = MIN_TAPE_SIZE,
    ):
        self.read_byte = read_byte
        self.write_byte = write_byte
        self.max_steps = max_steps
        self.tape_size = tape_size
        self.state: Optional[MachineState] = None

    def run(self, ops: Sequence[OffsetOp]) -> MachineState:
        self.state = MachineState(tape=Tape(self.tape_size))
        self._exec_body(ops)
        logger.debug("executed %d steps, pointer at %d", self.state.steps, self.state.pointer)
        return self.state

    # ---------------- helpers ----------------
    def _tick(self) -> None:
        state = self.state
        state.steps += 1
        if self.max_steps is not None and state.steps > self.max_steps:
            raise BFStepLimitError(
                message=f"step limit of {self.max_steps} exceeded",
                steps=state.steps,
                pointer=state.pointer,
                limit=self.max_steps,
            )

    def _address(self, offset: int) -> int:
        addr = self.state.pointer + offset
        if addr < 0:
            raise BFPointerError(
                message=f"pointer underflow: address {addr}",
                steps=self.state.steps,
                pointer=self.state.pointer,
                address=addr,
            )
        return addr

    def _read(self) -> int:
        try:
            value = self.read_byte()
        except OSError as exc:
            raise BFInputError(
                message=f"read failed: {exc}", steps=self.state.steps, pointer=self.state.pointer
            ) from exc
        if value is None:
            raise BFInputError(message="end of input", steps=self.state.steps, pointer=self.state.pointer)
        return value

    def _write(self, value: int) -> None:
        try:
            self.write_byte(value)
        except OSError as exc:
            raise BFOutputError(
                message=f"write failed: {exc}", steps=self.state.steps, pointer=self.state.pointer
            ) from exc

    # ---------------- main walk ----------------
    def _exec_body(self, ops: Sequence[OffsetOp]) -> None:
        state = self.state
        tape = state.tape
        for op in ops:
            self._tick()
            if isinstance(op, Add):
                addr = self._address(op.offset)
                tape[addr] = tape[addr] + op.delta
            elif isinstance(op, MovePointer):
                self._address(op.delta)
                state.pointer += op.delta
            elif isinstance(op, SetZero):
                tape[self._address(op.offset)] = op.value
            elif isinstance(op, MultiplyAdd):
                src = self._address(op.source)
                dst = self._address(op.dest)
                tape[dst] = tape[dst] + tape[src] * op.factor
            elif isinstance(op, ReadByte):
                addr = self._address(op.offset)
                tape[addr] = self._read()
            elif isinstance(op, WriteByte):
                self._write(tape[self._address(op.offset)])
            elif isinstance(op, Loop):
                while tape[state.pointer] != 0:
                    self._exec_body(op.body)
                    self._tick()
            else:
                raise TypeError(f"not an offset operation: {op!r}")


def execute(
    ops: Sequence[OffsetOp],
    read_byte: ReadCapability,
    write_byte: WriteCapability,
    *,
    max_steps: Optional[int] = None,
) -> MachineState:
    return Engine(read_byte, write_byte, max_steps=max_steps).run(ops)
