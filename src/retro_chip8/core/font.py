"""
組み込みの16進フォント。

0〜F の各グリフは 4x5 ピクセルのスプライトで、1行が1バイト（上位4ビットのみ使用）です。
"""
from retro_chip8.transport.bus import Bus

# @intent:constant フォントテーブルを配置する低位メモリのベースアドレス。
FONT_BASE = 0x050
GLYPH_SIZE = 5

FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


# @intent:responsibility 指定された桁のグリフ先頭アドレスを返します。
def glyph_address(digit: int) -> int:
    return FONT_BASE + (digit & 0xF) * GLYPH_SIZE


# @intent:responsibility フォントテーブルをバス経由で低位メモリへ書き込みます（ログなし）。
def load_font(bus: Bus) -> None:
    for offset, data in enumerate(FONT_SET):
        bus.load(FONT_BASE + offset, data)
