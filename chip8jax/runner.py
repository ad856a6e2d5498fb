"""Host-side driver pacing the interpreter in frames."""

import time
from functools import partial
from typing import Optional, Sequence

import jax
import jax.lax
import numpy as np
from tqdm import tqdm

from chip8jax import peripherals
from chip8jax.constants import TIMER_FREQUENCY
from chip8jax.emulator import run_n_instructions, step
from chip8jax.errors import Chip8Error, ErrorCode, raise_for_error
from chip8jax.logging import InterpreterLogger
from chip8jax.memory import load_program
from chip8jax.state import EmulatorState, create_state, clear_error
from chip8jax.timers import tick


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """Run one frame worth of instructions, then tick the timers once.

    Timers are not ticked when an instruction failed during the frame.
    """
    state = run_n_instructions(state, instructions_per_frame)
    return jax.lax.cond(state.error == ErrorCode.NONE, tick, lambda s: s, state)


class Chip8Runner:
    """Drives an `EmulatorState` the way a host frontend would.

    The runner owns the current state, executes ``instruction_frequency // fps``
    instructions per frame, ticks the timers once per frame and turns recorded
    errors into exceptions. Rendering, audio and real input stay with the caller:
    read `frame` and `sound_active`, write keys with `press_key` / `release_key`.
    """

    def __init__(
        self,
        program: Optional[bytes] = None,
        instruction_frequency: int = 700,
        fps: int = TIMER_FREQUENCY,
        modern_mode: bool = True,
        seed: int = 0,
        log_level: str = "INFO",
        logger: Optional[InterpreterLogger] = None,
    ):
        """Initialize the runner.

        Args:
            program: Raw program image to load at 0x200, if any
            instruction_frequency: CHIP-8 CPU frequency in Hz (typically 700)
            fps: Frame and timer rate in Hz (60 for authentic timers)
            modern_mode: Quirk selection passed to the emulator state
            seed: Seed for the random instruction
            log_level: Console log level
            logger: Logger to use instead of a fresh `InterpreterLogger`
        """
        if instruction_frequency <= 0 or fps <= 0:
            raise ValueError("instruction_frequency and fps must be positive")
        if instruction_frequency < fps:
            raise ValueError(
                f"instruction_frequency ({instruction_frequency}) must be at least fps ({fps})"
            )
        self.instruction_frequency = instruction_frequency
        self.fps = fps
        self.modern_mode = modern_mode
        self.seed = seed
        self.logger = logger or InterpreterLogger(log_level=log_level)
        self.program = b""
        self.frame_count = 0
        self.instruction_count = 0

        self.logger.log_configuration({
            "instruction_frequency": instruction_frequency,
            "fps": fps,
            "instructions_per_frame": self.instructions_per_frame,
            "modern_mode": modern_mode,
            "seed": seed,
        })

        self.state = self._fresh_state()
        if program is not None:
            self.load(program)

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions executed between two timer ticks."""
        return self.instruction_frequency // self.fps

    def _fresh_state(self) -> EmulatorState:
        return create_state(jax.random.PRNGKey(self.seed), modern_mode=self.modern_mode)

    def load(self, program: bytes, source: Optional[str] = None):
        """Reset the machine and load a new program image.

        Raises:
            ProgramTooLargeError: If the image does not fit in memory.
        """
        program = bytes(program)
        state = load_program(self._fresh_state(), program)
        self.program = program
        self.state = state
        self.frame_count = 0
        self.instruction_count = 0
        self.logger.log_program_loaded(len(program), source)

    def reset(self):
        """Restart the current program from a clean machine."""
        self.state = load_program(self._fresh_state(), self.program)
        self.frame_count = 0
        self.instruction_count = 0
        self.logger.log_reset()

    def clear_error(self):
        """Forget a recorded failure so execution can resume."""
        self.state = clear_error(self.state)

    def _raise_for_error(self):
        try:
            raise_for_error(self.state)
        except Chip8Error as e:
            self.logger.log_execution_error(e)
            raise

    def step(self) -> EmulatorState:
        """Execute a single instruction without ticking timers."""
        try:
            self.state = step(self.state)
        except Chip8Error as e:
            self.logger.log_execution_error(e)
            raise
        self.instruction_count += 1
        return self.state

    def tick(self) -> EmulatorState:
        """Tick the timers once."""
        self.state = tick(self.state)
        return self.state

    def run_frame(self) -> EmulatorState:
        """Execute one frame of instructions and tick the timers.

        Raises:
            Chip8Error: If an instruction failed; the failing state is kept in `state`.
        """
        self.state = run_frame(self.state, self.instructions_per_frame)
        self._raise_for_error()
        self.frame_count += 1
        self.instruction_count += self.instructions_per_frame
        self.logger.log_frame(
            self.frame_count, self.instruction_count, int(self.state.pc), self.sound_active
        )
        return self.state

    def run_frames(self, num_frames: int, progress: bool = False) -> EmulatorState:
        """Execute several frames back to back, optionally with a progress bar."""
        start = time.time()
        frames = range(num_frames)
        if progress:
            frames = tqdm(frames, desc=f"Running ({num_frames:,} frames)", unit="frame")
        for _ in frames:
            self.run_frame()
        self.logger.log_run_summary(
            num_frames, num_frames * self.instructions_per_frame, time.time() - start
        )
        return self.state

    def press_key(self, key: int):
        self.state = peripherals.press_key(self.state, key)

    def release_key(self, key: int):
        self.state = peripherals.release_key(self.state, key)

    def set_keypad(self, keys: Sequence[bool]):
        self.state = peripherals.set_keypad(self.state, keys)

    @property
    def frame(self) -> np.ndarray:
        """Current display as a (32, 64) boolean array."""
        return peripherals.display_frame(self.state)

    @property
    def sound_active(self) -> bool:
        return peripherals.sound_active(self.state)

    @property
    def needs_redraw(self) -> bool:
        return peripherals.needs_redraw(self.state)

    def acknowledge_draw(self):
        self.state = peripherals.acknowledge_draw(self.state)
