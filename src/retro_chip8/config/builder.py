from random import Random
from typing import Tuple
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.state import MEMORY_SIZE
from retro_chip8.loader.loader import RomLoader
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPUを生成・接続し、ROMをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        rng = Random(config.seed) if config.seed is not None else Random()
        cpu = Chip8Cpu(bus, rng=rng)

        if config.rom:
            size = RomLoader().load_rom(config.rom, cpu)
            print(f"Loaded {size} bytes from {config.rom}")

        return cpu, bus

    # @intent:responsibility キー名（Qtのキー名に合わせた大文字表記）からキーパッド番号への表を作ります。
    def build_keymap(self, config: SystemConfig) -> dict:
        keymap = {}
        for key_name, index in config.keymap.items():
            if len(key_name) != 1:
                print(f"Warning: Unsupported key name '{key_name}' for keypad {index:X}, ignored")
                continue
            keymap[key_name.upper()] = index
        return keymap
