# src/retro_chip8/core/instructions/base.py
"""
CHIP-8 命令実装用の共通ユーティリティ。
"""
from typing import List

from retro_chip8.common.errors import AddressOutOfRange
from retro_chip8.core.snapshot import Operation, OpKind
from retro_chip8.core.state import Chip8CpuState, ADDRESS_MASK
from retro_chip8.transport.bus import Bus

# @intent:utility_function バスから16ビット命令ワードをビッグエンディアン形式で読み込みます。
def fetch_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)

# @intent:utility_function 命令ワードを各フィールドに分解してOperationを生成します。
def make_operation(opcode: int, kind: OpKind, mnemonic: str, operands: List[str]) -> Operation:
    return Operation(
        opcode=opcode,
        kind=kind,
        mnemonic=mnemonic,
        operands=operands,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF,
    )

# @intent:utility_function 未定義の命令ワードを表すOperationを生成します。
def unknown_operation(opcode: int) -> Operation:
    return make_operation(opcode, OpKind.UNKNOWN, "UNKNOWN", [f"${opcode:04X}"])

def reg(index: int) -> str:
    return f"V{index:X}"

def imm(value: int) -> str:
    return f"#{value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function 次の命令を読み飛ばします（PCは既に次の命令を指しています）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc += 2

# @intent:utility_function 計算されたアドレスが12bitのアドレス空間に収まることを検証します。
# @intent:rationale アドレス計算はラップアラウンドせず、範囲外は呼び出し元へ報告します。
def check_address(address: int, what: str) -> int:
    if not 0 <= address <= ADDRESS_MASK:
        raise AddressOutOfRange(f"{what} {address:#06x} is outside the addressable range.")
    return address
