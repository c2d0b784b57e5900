from __future__ import annotations

from dataclasses import dataclass, field

from .tape import Tape


@dataclass
class MachineState:
    pointer: int = 0
    steps: int = 0
    tape: Tape = field(default_factory=Tape)
