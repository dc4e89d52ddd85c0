# retro_chip8/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CHIP-8 仮想マシンの可変状態（レジスタ群、スタック、タイマー、
フレームバッファ、キーパッド）を保持するデータ構造を定義します。
メモリ本体はBus上のRAMデバイスが保持します。
"""
from dataclasses import dataclass, field
from typing import List, Optional

# @intent:constant CHIP-8 の固定寸法。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
ADDRESS_MASK = 0xFFF
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
REGISTER_COUNT = 16
STACK_DEPTH = 16
KEY_COUNT = 16
FLAG_REGISTER = 0xF


def _blank_framebuffer() -> List[List[bool]]:
    return [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]


# @intent:responsibility CHIP-8 の全てのレジスタとマシン状態を保持します。
# @intent:rationale 全ての記憶領域は固定長で事前確保し、要素の追加・削除は行いません。
@dataclass
class Chip8CpuState:
    """
    CHIP-8 のレジスタ状態を保持するデータクラス。
    framebuffer は framebuffer[y][x] でアクセスします。
    """
    pc: int = PROGRAM_START  # Program Counter
    sp: int = 0              # Stack Pointer (使用中のスロット数, 0..16)
    i: int = 0               # Index Register
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    keypad: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    framebuffer: List[List[bool]] = field(default_factory=_blank_framebuffer)
    # FX0A 待機中のレジスタ番号。Noneなら通常実行。
    awaiting_key: Optional[int] = None
    # 待機中に届いたキー押下イベント
    pending_key: Optional[int] = None

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    # @intent:responsibility フラグを0/1に正規化してVFへ書き込みます。
    def set_flag(self, value: bool) -> None:
        self.v[FLAG_REGISTER] = 1 if value else 0

    # @intent:responsibility フレームバッファの全ピクセルを消灯します。
    def clear_framebuffer(self) -> None:
        for row in self.framebuffer:
            for x in range(DISPLAY_WIDTH):
                row[x] = False

    # @intent:responsibility 独立した複製を返します（リストは全て深くコピーされます）。
    def copy(self) -> 'Chip8CpuState':
        return Chip8CpuState(
            pc=self.pc,
            sp=self.sp,
            i=self.i,
            v=list(self.v),
            stack=list(self.stack),
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
            keypad=list(self.keypad),
            framebuffer=[list(row) for row in self.framebuffer],
            awaiting_key=self.awaiting_key,
            pending_key=self.pending_key,
        )
