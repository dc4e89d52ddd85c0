from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:constant COSMAC VIP の 4x4 キーパッド配置を、PCキーボードの左上 4x4 ブロックに割り当てます。
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#FFFF00"
    background: str = "#000000"

@dataclass
class SystemConfig:
    rom: Optional[str] = None
    instructions_per_frame: int = 10  # 60Hzフレームあたりの命令数
    timer_hz: int = 60
    seed: Optional[int] = None  # CXNN 用の乱数シード
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
