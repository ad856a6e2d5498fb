"""Tests for the frame-paced host driver."""

import pytest
from chip8jax import (
    Chip8Runner, ErrorCode, UnknownInstructionError, ProgramTooLargeError, InvalidKeyError,
    MAX_PROGRAM_SIZE,
)
from conftest import words_to_bytes

# JP 0x200
IDLE = words_to_bytes([0x1200])


@pytest.fixture
def runner():
    return Chip8Runner(IDLE, log_level="ERROR")


class TestConfiguration:

    def test_defaults(self, runner):
        assert runner.instruction_frequency == 700
        assert runner.fps == 60
        assert runner.instructions_per_frame == 11
        assert runner.modern_mode
        assert runner.state.modern_mode

    def test_legacy_mode(self):
        runner = Chip8Runner(IDLE, modern_mode=False, log_level="ERROR")
        assert not runner.state.modern_mode

    @pytest.mark.parametrize("frequency,fps", [(0, 60), (700, 0), (-1, 60), (30, 60)])
    def test_invalid_rates(self, frequency, fps):
        with pytest.raises(ValueError):
            Chip8Runner(instruction_frequency=frequency, fps=fps, log_level="ERROR")

    def test_custom_rate(self):
        runner = Chip8Runner(IDLE, instruction_frequency=600, fps=60, log_level="ERROR")
        assert runner.instructions_per_frame == 10


class TestLoading:

    def test_load_logs_size(self, capsys):
        Chip8Runner(words_to_bytes([0x00E0, 0x1202]))
        assert "Loaded 4 byte program" in capsys.readouterr().out

    def test_load_source_in_log(self, capsys):
        runner = Chip8Runner(log_level="INFO")
        runner.load(IDLE, source="idle.ch8")
        assert "from idle.ch8" in capsys.readouterr().out

    def test_quiet_level(self, capsys):
        Chip8Runner(IDLE, log_level="ERROR")
        assert capsys.readouterr().out == ""

    def test_program_too_large(self):
        runner = Chip8Runner(log_level="ERROR")
        with pytest.raises(ProgramTooLargeError):
            runner.load(bytes(MAX_PROGRAM_SIZE + 1))

    def test_reset(self, runner):
        runner.run_frames(2)
        runner.reset()
        assert runner.state.pc == 0x200
        assert runner.frame_count == 0
        assert runner.instruction_count == 0
        assert runner.state.memory[0x200] == 0x12


class TestFrames:

    def test_run_frame_ticks_timers_once(self):
        # V0 = 10; delay = V0; spin
        runner = Chip8Runner(words_to_bytes([0x600A, 0xF015, 0x1204]), log_level="ERROR")
        runner.run_frame()
        assert runner.state.delay_timer == 9
        runner.run_frames(3)
        assert runner.state.delay_timer == 6
        assert runner.frame_count == 4
        assert runner.instruction_count == 44

    def test_step_does_not_tick(self):
        runner = Chip8Runner(words_to_bytes([0x600A, 0xF015, 0x1204]), log_level="ERROR")
        runner.step()
        runner.step()
        assert runner.state.delay_timer == 10
        assert runner.instruction_count == 2

    def test_run_frames_with_progress(self, runner):
        runner.run_frames(3, progress=True)
        assert runner.frame_count == 3
        assert runner.state.pc == 0x200

    def test_sound_follows_timer(self):
        # V0 = 3; sound = V0; spin
        runner = Chip8Runner(words_to_bytes([0x6003, 0xF018, 0x1204]), log_level="ERROR")
        runner.run_frame()
        assert runner.sound_active
        runner.run_frames(2)
        assert not runner.sound_active

    def test_redraw_flag(self):
        runner = Chip8Runner(words_to_bytes([0x00E0, 0x1202]), log_level="ERROR")
        assert not runner.needs_redraw
        runner.run_frame()
        assert runner.needs_redraw
        runner.acknowledge_draw()
        assert not runner.needs_redraw
        assert runner.frame.shape == (32, 64)
        assert not runner.frame.any()


class TestErrors:

    def test_unknown_instruction_raises(self):
        runner = Chip8Runner(b"\xFF\xFF", log_level="CRITICAL")
        with pytest.raises(UnknownInstructionError) as excinfo:
            runner.run_frame()
        assert excinfo.value.pc == 0x200
        assert excinfo.value.opcode == 0xFFFF
        assert runner.state.error == ErrorCode.UNKNOWN_INSTRUCTION
        assert runner.state.pc == 0x200
        assert runner.frame_count == 0

    def test_error_logged(self, capsys):
        runner = Chip8Runner(b"\xFF\xFF", log_level="ERROR")
        with pytest.raises(UnknownInstructionError):
            runner.step()
        assert "UnknownInstructionError" in capsys.readouterr().out

    def test_timers_frozen_on_error(self):
        # V0 = 5; delay = V0; invalid
        runner = Chip8Runner(words_to_bytes([0x6005, 0xF015, 0xFFFF]), log_level="CRITICAL")
        with pytest.raises(UnknownInstructionError):
            runner.run_frame()
        assert runner.state.delay_timer == 5

    def test_clear_error_keeps_failing_word(self):
        runner = Chip8Runner(b"\xFF\xFF", log_level="CRITICAL")
        with pytest.raises(UnknownInstructionError):
            runner.run_frame()
        runner.clear_error()
        assert runner.state.error == ErrorCode.NONE
        with pytest.raises(UnknownInstructionError):
            runner.step()


class TestInput:

    def test_wait_for_key_through_frames(self):
        # V0 = key; spin
        runner = Chip8Runner(words_to_bytes([0xF00A, 0x1202]), log_level="ERROR")
        runner.run_frame()
        assert runner.state.pc == 0x200
        assert runner.state.awaiting_key

        runner.press_key(7)
        runner.run_frame()
        assert runner.state.V[0] == 7
        assert runner.state.pc == 0x202
        assert not runner.state.awaiting_key

    def test_set_keypad(self, runner):
        keys = [False] * 16
        keys[3] = True
        runner.set_keypad(keys)
        assert runner.state.keypad[3]
        runner.release_key(3)
        assert not runner.state.keypad[3]

    def test_invalid_key(self, runner):
        with pytest.raises(InvalidKeyError):
            runner.press_key(16)
