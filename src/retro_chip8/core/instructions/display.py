# src/retro_chip8/core/instructions/display.py
"""
表示命令（画面消去、スプライト描画）の実装。
"""
from random import Random

from retro_chip8.core.snapshot import Operation, OpKind
from retro_chip8.core.state import Chip8CpuState, DISPLAY_WIDTH, DISPLAY_HEIGHT
from retro_chip8.transport.bus import Bus
from .base import make_operation, reg

# --- CLS ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.CLS, "CLS", [])

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.clear_framebuffer()

# --- DRW Vx, Vy, nibble ---
def decode_drw(opcode: int) -> Operation:
    return make_operation(
        opcode, OpKind.DRW, "DRW",
        [reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF), f"#{opcode & 0xF:X}"]
    )

# @intent:responsibility DXYN: memory[I..I+N) のNバイトのスプライトをXORで描画します。
# @intent:rationale 座標は各ピクセルごとに独立して画面幅・高さでラップします。
#                  VFは全ピクセルにわたる（スプライトビット AND 描画前ピクセル）の論理和です。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    bus.check_range(state.i, op.n)
    origin_x = state.v[op.x] % DISPLAY_WIDTH
    origin_y = state.v[op.y] % DISPLAY_HEIGHT
    collision = False

    for row in range(op.n):
        sprite = bus.read(state.i + row)
        line = state.framebuffer[(origin_y + row) % DISPLAY_HEIGHT]
        for bit in range(8):
            if not sprite & (0x80 >> bit):
                continue
            px = (origin_x + bit) % DISPLAY_WIDTH
            if line[px]:
                collision = True
            line[px] = not line[px]

    state.set_flag(collision)
