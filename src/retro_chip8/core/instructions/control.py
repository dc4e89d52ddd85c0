# src/retro_chip8/core/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

実行時点でPCは既に次の命令を指しています。制御移行命令はPCに最終的な値を直接設定し、
スキップ命令はさらに2バイト進めます。
"""
from random import Random

from retro_chip8.common.errors import StackOverflow, StackUnderflow
from retro_chip8.core.snapshot import Operation, OpKind
from retro_chip8.core.state import Chip8CpuState, STACK_DEPTH
from retro_chip8.transport.bus import Bus
from .base import make_operation, unknown_operation, reg, imm, addr, skip_next, check_address

# --- RET ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.RET, "RET", [])

# @intent:responsibility 00EE: スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.sp == 0:
        raise StackUnderflow(f"RET with empty call stack at {state.pc - op.length:#05x}")
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- JP addr ---
def decode_jp(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.JP, "JP", [addr(opcode & 0xFFF)])

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.pc = op.nnn

# --- CALL addr ---
def decode_call(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.CALL, "CALL", [addr(opcode & 0xFFF)])

# @intent:responsibility 2NNN: 戻りアドレス（CALLの次の命令）をプッシュしてからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackOverflow(f"CALL with full call stack ({STACK_DEPTH} entries) at {state.pc - op.length:#05x}")
    # state.pc is currently pointing to the NEXT instruction
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.nnn

# --- SE/SNE ---
def decode_se_imm(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.SE_IMM, "SE", [reg((opcode >> 8) & 0xF), imm(opcode & 0xFF)])

def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] == op.nn:
        skip_next(state)

def decode_sne_imm(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.SNE_IMM, "SNE", [reg((opcode >> 8) & 0xF), imm(opcode & 0xFF)])

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] != op.nn:
        skip_next(state)

# 5XY0 / 9XY0 は下位ニブルが0の場合のみ定義されています
def decode_se_reg(opcode: int) -> Operation:
    if opcode & 0xF:
        return unknown_operation(opcode)
    return make_operation(opcode, OpKind.SE_REG, "SE", [reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF)])

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

def decode_sne_reg(opcode: int) -> Operation:
    if opcode & 0xF:
        return unknown_operation(opcode)
    return make_operation(opcode, OpKind.SNE_REG, "SNE", [reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF)])

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- JP V0, addr ---
def decode_jp_v0(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.JP_V0, "JP", ["V0", addr(opcode & 0xFFF)])

# @intent:responsibility BNNN: NNN + V0 へジャンプします。12bitを超える場合はラップせず報告します。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    state.pc = check_address(op.nnn + state.v[0], "Jump target")

# --- SKP/SKNP ---
def decode_skp(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.SKP, "SKP", [reg((opcode >> 8) & 0xF)])

# @intent:responsibility EX9E: V[X] の下位4bitが示すキーが押されていれば次の命令を読み飛ばします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if state.keypad[state.v[op.x] & 0xF]:
        skip_next(state)

def decode_sknp(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.SKNP, "SKNP", [reg((opcode >> 8) & 0xF)])

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, rng: Random) -> None:
    if not state.keypad[state.v[op.x] & 0xF]:
        skip_next(state)
