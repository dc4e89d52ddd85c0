# src/retro_chip8/core/instructions/__init__.py
"""
CHIP-8 命令セット実装パッケージ。
"""
from random import Random

from retro_chip8.common.errors import InvalidOpcode
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8CpuState
from retro_chip8.transport.bus import Bus
from .base import unknown_operation
from .maps import (
    DECODE_MAP, SYSTEM_DECODE_MAP, ALU_DECODE_MAP, KEY_DECODE_MAP, MISC_DECODE_MAP, EXECUTE_MAP
)

# @intent:responsibility 16bitの命令ワードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    命令ワードをデコードし、Operationオブジェクトを返します。
    どのマッピングにも一致しない場合は OpKind.UNKNOWN のOperationを返します。
    """
    family = (opcode >> 12) & 0xF
    if family == 0x0:
        decoder = SYSTEM_DECODE_MAP.get(opcode)
    elif family == 0x8:
        decoder = ALU_DECODE_MAP.get(opcode & 0xF)
    elif family == 0xE:
        decoder = KEY_DECODE_MAP.get(opcode & 0xFF)
    elif family == 0xF:
        decoder = MISC_DECODE_MAP.get(opcode & 0xFF)
    else:
        decoder = DECODE_MAP.get(family)
    if decoder:
        return decoder(opcode)
    return unknown_operation(opcode)

# @intent:responsibility デコードされた命令を実行します。
# @intent:pre-condition state.pc は既に次の命令（命令アドレス + operation.length）を指している必要があります。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, rng: Random) -> None:
    """
    デコードされた命令を実行し、CPUの状態を変更します。
    未定義の命令は InvalidOpcode として報告します。
    """
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        raise InvalidOpcode(operation.opcode, state.pc - operation.length)
    executor(state, bus, operation, rng)
