# src/retro_chip8/core/instructions/load.py
"""
転送命令（インデックスレジスタ、タイマー、メモリ転送、キー入力待ち）の実装。
"""
from random import Random

from retro_chip8.core.font import glyph_address
from retro_chip8.core.snapshot import Operation, OpKind
from retro_chip8.core.state import Chip8CpuState
from retro_chip8.transport.bus import Bus
from .base import make_operation, reg, addr, check_address

# --- LD I, addr ---
def decode_ld_i(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_I, "LD", ["I", addr(opcode & 0xFFF)])

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = op.nnn

# --- Timers ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_VX_DT, "LD", [reg((opcode >> 8) & 0xF), "DT"])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.delay_timer

def decode_ld_dt_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_DT_VX, "LD", ["DT", reg((opcode >> 8) & 0xF)])

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.delay_timer = state.v[op.x]

def decode_ld_st_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_ST_VX, "LD", ["ST", reg((opcode >> 8) & 0xF)])

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.sound_timer = state.v[op.x]

# --- LD Vx, K ---
def decode_ld_vx_k(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_VX_K, "LD", [reg((opcode >> 8) & 0xF), "K"])

# @intent:responsibility FX0A: キー入力待ちのサブ状態へ遷移します。
# @intent:rationale コア内部でビジーウェイトせず、キー押下イベント到着後のstepで V[X] への書き込みを完了します。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.awaiting_key = op.x
    state.pending_key = None

# --- ADD I, Vx ---
def decode_add_i_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.ADD_I_VX, "ADD", ["I", reg((opcode >> 8) & 0xF)])

def execute_add_i_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = check_address(state.i + state.v[op.x], "Index register")

# --- LD F, Vx ---
def decode_ld_f_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_F_VX, "LD", ["F", reg((opcode >> 8) & 0xF)])

# @intent:responsibility FX29: V[X] の下位4bitが示す16進グリフの先頭アドレスを I に設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.i = glyph_address(state.v[op.x])

# --- LD B, Vx ---
def decode_ld_b_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_B_VX, "LD", ["B", reg((opcode >> 8) & 0xF)])

# @intent:responsibility FX33: V[X] の百・十・一の位を memory[I..I+2] に書き込みます。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    bus.check_range(state.i, 3)
    value = state.v[op.x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx ---
def decode_ld_mem_vx(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_MEM_VX, "LD", ["[I]", reg((opcode >> 8) & 0xF)])

# @intent:responsibility FX55: V0..VX（Xを含む）を memory[I..I+X] に書き込みます。Iは変化しません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    bus.check_range(state.i, op.x + 1)
    for index in range(op.x + 1):
        bus.write(state.i + index, state.v[index])

# --- LD Vx, [I] ---
def decode_ld_vx_mem(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_VX_MEM, "LD", [reg((opcode >> 8) & 0xF), "[I]"])

# @intent:responsibility FX65: memory[I..I+X] を V0..VX（Xを含む）へ読み込みます。Iは変化しません。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    bus.check_range(state.i, op.x + 1)
    for index in range(op.x + 1):
        state.v[index] = bus.read(state.i + index)
