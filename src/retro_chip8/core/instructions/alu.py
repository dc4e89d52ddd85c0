# src/retro_chip8/core/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを生成する命令は全て真偽値を0/1に正規化してVFへ書き込みます。
結果レジスタを先に書き込み、フラグを後に書き込むため、X=F の場合はフラグが残ります。
"""
from random import Random

from retro_chip8.core.snapshot import Operation, OpKind
from retro_chip8.core.state import Chip8CpuState
from retro_chip8.transport.bus import Bus
from .base import make_operation, reg, imm

# --- LD Vx, byte ---
def decode_ld_imm(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.LD_IMM, "LD", [reg((opcode >> 8) & 0xF), imm(opcode & 0xFF)])

# @intent:responsibility 6XNN: V[X] に即値を設定します。
def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = op.nn

# --- ADD Vx, byte ---
def decode_add_imm(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.ADD_IMM, "ADD", [reg((opcode >> 8) & 0xF), imm(opcode & 0xFF)])

# @intent:responsibility 7XNN: V[X] に即値を加算します（8bitラップアラウンド、VFは変化しません）。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = (state.v[op.x] + op.nn) & 0xFF

# --- 8XY_ 系 ---
def _decode_xy(opcode: int, kind: OpKind, mnemonic: str) -> Operation:
    return make_operation(opcode, kind, mnemonic, [reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF)])

def decode_ld_reg(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.LD_REG, "LD")

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.v[op.y]

def decode_or(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.OR, "OR")

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.v[op.x] | state.v[op.y]

def decode_and(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.AND, "AND")

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.v[op.x] & state.v[op.y]

def decode_xor(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.XOR, "XOR")

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = state.v[op.x] ^ state.v[op.y]

def decode_add_reg(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.ADD_REG, "ADD")

# @intent:responsibility 8XY4: 加算し、真の和が255を超えた場合 VF=1 とします。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.set_flag(res > 0xFF)

def decode_sub(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.SUB, "SUB")

# @intent:responsibility 8XY5: V[X] - V[Y]。ボローが発生しなければ VF=1 とします。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.set_flag(v1 >= v2)

def decode_shr(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.SHR, "SHR")

# @intent:responsibility 8XY6: シフト前の最下位ビットを VF に残し、V[X] を右へ1ビットシフトします。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = v1 >> 1
    state.set_flag((v1 & 0x01) != 0)

def decode_subn(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.SUBN, "SUBN")

# @intent:responsibility 8XY7: V[Y] - V[X]。ボローが発生しなければ VF=1 とします。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.set_flag(v2 >= v1)

def decode_shl(opcode: int) -> Operation:
    return _decode_xy(opcode, OpKind.SHL, "SHL")

# @intent:responsibility 8XYE: シフト前の最上位ビットを0/1として VF に残し、V[X] を左へ1ビットシフトします。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = (v1 << 1) & 0xFF
    state.set_flag((v1 & 0x80) != 0)

# --- RND Vx, byte ---
def decode_rnd(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.RND, "RND", [reg((opcode >> 8) & 0xF), imm(opcode & 0xFF)])

# @intent:responsibility CXNN: 注入された乱数生成器の1バイトと即値の論理積を V[X] に設定します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.v[op.x] = rng.randrange(0x100) & op.nn
