# retro_chip8/core/snapshot.py
"""
デコード結果と実行状態の不変スナップショット

このモジュールは、デコードされた命令（Operation）と、1ステップ実行後の
CPUとバスの状態を記録した不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import Chip8CpuState
from retro_chip8.transport.bus import BusAccess


# @intent:responsibility デコードされた命令の種別（タグ）を定義します。
# @intent:rationale ニブルの組み合わせを実行側で再解釈せず、1命令1バリアントで網羅的にディスパッチするためのタグです。
class OpKind(Enum):
    CLS = "CLS"                 # 00E0
    RET = "RET"                 # 00EE
    JP = "JP"                   # 1NNN
    CALL = "CALL"               # 2NNN
    SE_IMM = "SE_IMM"           # 3XNN
    SNE_IMM = "SNE_IMM"         # 4XNN
    SE_REG = "SE_REG"           # 5XY0
    LD_IMM = "LD_IMM"           # 6XNN
    ADD_IMM = "ADD_IMM"         # 7XNN
    LD_REG = "LD_REG"           # 8XY0
    OR = "OR"                   # 8XY1
    AND = "AND"                 # 8XY2
    XOR = "XOR"                 # 8XY3
    ADD_REG = "ADD_REG"         # 8XY4
    SUB = "SUB"                 # 8XY5
    SHR = "SHR"                 # 8XY6
    SUBN = "SUBN"               # 8XY7
    SHL = "SHL"                 # 8XYE
    SNE_REG = "SNE_REG"         # 9XY0
    LD_I = "LD_I"               # ANNN
    JP_V0 = "JP_V0"             # BNNN
    RND = "RND"                 # CXNN
    DRW = "DRW"                 # DXYN
    SKP = "SKP"                 # EX9E
    SKNP = "SKNP"               # EXA1
    LD_VX_DT = "LD_VX_DT"       # FX07
    LD_VX_K = "LD_VX_K"         # FX0A
    LD_DT_VX = "LD_DT_VX"       # FX15
    LD_ST_VX = "LD_ST_VX"       # FX18
    ADD_I_VX = "ADD_I_VX"       # FX1E
    LD_F_VX = "LD_F_VX"         # FX29
    LD_B_VX = "LD_B_VX"         # FX33
    LD_MEM_VX = "LD_MEM_VX"     # FX55
    LD_VX_MEM = "LD_VX_MEM"     # FX65
    UNKNOWN = "UNKNOWN"


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令（命令ワード、種別、ニーモニック、各フィールド）を記録するデータクラス。
    """
    opcode: int # 16bit 命令ワード
    kind: OpKind
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "#05"]
    x: int = 0 # 第2ニブル
    y: int = 0 # 第3ニブル
    n: int = 0 # 下位4bit
    nn: int = 0 # 下位8bit
    nnn: int = 0 # 下位12bit
    length: int = 2 # 命令のバイト長
    cycle_count: int = 1

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    @property
    def nibbles(self) -> tuple:
        return (
            (self.opcode >> 12) & 0xF,
            (self.opcode >> 8) & 0xF,
            (self.opcode >> 4) & 0xF,
            self.opcode & 0xF,
        )

    # @intent:responsibility 表示用のアセンブリ表記を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    cycle_count: int
    address: int = 0 # 命令を実行したアドレス
    text: Optional[str] = None # 例: "ADD V0, #03"

# @intent:responsibility 1ステップ実行後のCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1ステップ実行後の、CPUとバスの状態を記録した不変のデータ構造。
    state は実行後の状態の複製であり、以後の実行で変化しません。
    """
    state: Chip8CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
    awaiting_key: bool = False
