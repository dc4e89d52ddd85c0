# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8 のROMイメージ（ヘッダの無い生バイナリ、一般に .ch8）をCPUへロードします。
"""
from pathlib import Path
from typing import Union

from retro_chip8.core.cpu import Chip8Cpu

class RomLoader:
    """
    生バイナリ形式のROMファイルを読み込み、プログラム領域（0x200〜）へロードするローダー。
    """
    # @intent:responsibility ROMファイルを読み込み、CPUのプログラム領域へ書き込みます。
    # @intent:return ロードしたバイト数。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        data = Path(file_path).read_bytes()
        if not data:
            raise ValueError(f"ROM file {file_path} is empty.")
        cpu.load_program(data)
        return len(data)
