# tests/core/test_instructions_display.py
"""
表示命令（CLS, DRW）の単体テスト。
"""
import pytest
from random import Random

from retro_chip8.common.errors import AddressOutOfRange
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.instructions import decode_opcode, execute_instruction
from retro_chip8.core.state import DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:test_suite スプライト描画のXOR合成、ラップアラウンド、衝突フラグを検証します。

@pytest.fixture
def setup_cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    cpu = Chip8Cpu(bus)
    return cpu, bus, cpu.get_state()

def run(state, bus, opcode):
    op = decode_opcode(opcode)
    state.pc += op.length
    execute_instruction(op, state, bus, Random(0))

def lit(state):
    return {(x, y) for y, row in enumerate(state.framebuffer) for x, on in enumerate(row) if on}

class TestDisplayInstructions:
    def test_cls_clears_everything(self, setup_cpu):
        cpu, bus, state = setup_cpu
        for y in range(DISPLAY_HEIGHT):
            for x in range(0, DISPLAY_WIDTH, 3):
                state.framebuffer[y][x] = True
        run(state, bus, 0x00E0)
        fb = cpu.get_framebuffer()
        assert len(fb) == DISPLAY_HEIGHT
        assert all(len(row) == DISPLAY_WIDTH and not any(row) for row in fb)

    def test_draw_msb_first(self, setup_cpu):
        cpu, bus, state = setup_cpu
        bus.write(0x300, 0b10100000)
        state.i = 0x300
        state.v[0], state.v[1] = 4, 6
        run(state, bus, 0xD011)
        assert lit(state) == {(4, 6), (6, 6)}
        assert state.vf == 0

    # @intent:test_case_idempotence 同じスプライトを2回描くと元に戻り、2回目で衝突が報告されることを検証します。
    def test_draw_twice_restores_and_collides(self, setup_cpu):
        cpu, bus, state = setup_cpu
        for row, data in enumerate([0xF0, 0x90, 0xF0]):
            bus.write(0x300 + row, data)
        state.i = 0x300
        state.v[2], state.v[3] = 10, 10
        state.framebuffer[0][0] = True
        before = cpu.get_framebuffer()

        run(state, bus, 0xD233)
        assert state.vf == 0
        assert cpu.get_framebuffer() != before

        run(state, bus, 0xD233)
        assert state.vf == 1
        assert cpu.get_framebuffer() == before

    def test_draw_wraps_each_pixel(self, setup_cpu):
        cpu, bus, state = setup_cpu
        bus.write(0x300, 0xFF)
        bus.write(0x301, 0xFF)
        state.i = 0x300
        state.v[0], state.v[1] = 60, 31
        run(state, bus, 0xD012)
        expected = {(x % 64, y % 32) for y in (31, 32) for x in range(60, 68)}
        assert lit(state) == expected

    def test_draw_origin_wraps(self, setup_cpu):
        cpu, bus, state = setup_cpu
        bus.write(0x300, 0x80)
        state.i = 0x300
        state.v[0], state.v[1] = 64 + 5, 32 + 7
        run(state, bus, 0xD011)
        assert lit(state) == {(5, 7)}

    # @intent:test_case_collision_or 衝突フラグは最後のピクセルではなく全ピクセルの論理和であることを検証します。
    def test_collision_is_or_over_all_pixels(self, setup_cpu):
        cpu, bus, state = setup_cpu
        bus.write(0x300, 0b11000000)
        state.i = 0x300
        state.framebuffer[0][0] = True # only the first pixel collides
        run(state, bus, 0xD001)
        assert state.vf == 1
        assert lit(state) == {(1, 0)}

    def test_draw_clears_stale_flag(self, setup_cpu):
        cpu, bus, state = setup_cpu
        bus.write(0x300, 0x80)
        state.i = 0x300
        state.v[0xF] = 1
        run(state, bus, 0xD001)
        assert state.vf == 0

    def test_draw_sprite_span_out_of_range(self, setup_cpu):
        cpu, bus, state = setup_cpu
        state.i = 0xFFD
        with pytest.raises(AddressOutOfRange):
            run(state, bus, 0xD005)
        assert lit(state) == set()
