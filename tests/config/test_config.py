# tests/config/test_config.py
"""
retro_chip8.configパッケージの単体テスト。
YAML設定の読み込みと、設定からのシステム構築を検証します。
"""
import pytest

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig, DEFAULT_KEYMAP
from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.font import FONT_BASE, FONT_SET

# @intent:test_suite システム構成の読み込みと構築の検証。

def write_config(tmp_path, text, name="system.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)

class TestConfigLoader:
    def test_empty_file_uses_defaults(self, tmp_path):
        config = ConfigLoader().load_from_file(write_config(tmp_path, ""))
        assert config.rom is None
        assert config.instructions_per_frame == 10
        assert config.timer_hz == 60
        assert config.seed is None
        assert config.display.scale == 10
        assert config.keymap == DEFAULT_KEYMAP

    def test_full_config(self, tmp_path):
        text = """
rom: /roms/pong.ch8
instructions_per_frame: 12
timer_hz: 60
seed: "0x2A"
display:
  scale: 8
  foreground: "#00FF00"
  background: "#101010"
"""
        config = ConfigLoader().load_from_file(write_config(tmp_path, text))
        assert config.rom == "/roms/pong.ch8"
        assert config.instructions_per_frame == 12
        assert config.seed == 42
        assert config.display.scale == 8
        assert config.display.foreground == "#00FF00"
        assert config.display.background == "#101010"

    # @intent:test_case_rom_path 相対ROMパスは設定ファイルの位置から解決されることを検証します。
    def test_relative_rom_path(self, tmp_path):
        config = ConfigLoader().load_from_file(write_config(tmp_path, "rom: games/test.ch8\n"))
        assert config.rom == str(tmp_path / "games" / "test.ch8")

    def test_keymap_override(self, tmp_path):
        text = """
keymap:
  k: 0x5
  L: 6
"""
        config = ConfigLoader().load_from_file(write_config(tmp_path, text))
        assert config.keymap == {"K": 5, "L": 6}

    def test_keymap_index_out_of_range(self, tmp_path):
        with pytest.raises(ValueError, match="Keypad index"):
            ConfigLoader().load_from_file(write_config(tmp_path, "keymap:\n  K: 16\n"))

    @pytest.mark.parametrize("text", [
        "instructions_per_frame: 0\n",
        "timer_hz: -60\n",
        "display:\n  scale: 0\n",
        "seed: true\n",
        "seed: [1, 2]\n",
        "instructions_per_frame: fast\n",
        "- just\n- a list\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_file(write_config(tmp_path, text))

    def test_malformed_yaml_is_value_error(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigLoader().load_from_file(write_config(tmp_path, "timer_hz: [60\n"))

class TestSystemBuilder:
    def test_build_without_rom(self):
        cpu, bus = SystemBuilder().build_system(SystemConfig())
        assert isinstance(cpu, Chip8Cpu)
        assert bus.get_end_address() == 0xFFF
        assert bus.peek(FONT_BASE) == FONT_SET[0]
        assert cpu.get_state().pc == 0x200

    def test_build_loads_rom(self, tmp_path, capsys):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x60, 0x05, 0x70, 0x03]))
        cpu, bus = SystemBuilder().build_system(SystemConfig(rom=str(rom)))
        assert bus.peek(0x200) == 0x60
        assert "Loaded 4 bytes" in capsys.readouterr().out

    # @intent:test_case_seed 同じシードからは同じ乱数列が得られることを検証します。
    def test_seed_makes_random_deterministic(self, tmp_path):
        rom = tmp_path / "rnd.ch8"
        rom.write_bytes(bytes([0xC0, 0xFF, 0xC1, 0xFF, 0xC2, 0xFF]))
        results = []
        for _ in range(2):
            cpu, _ = SystemBuilder().build_system(SystemConfig(rom=str(rom), seed=1234))
            for _ in range(3):
                cpu.step()
            results.append(cpu.get_state().v[:3])
        assert results[0] == results[1]

    def test_build_keymap(self, capsys):
        config = SystemConfig(keymap={"q": 0x4, "Space": 0x0})
        keymap = SystemBuilder().build_keymap(config)
        assert keymap == {"Q": 0x4}
        assert "Unsupported key name 'Space'" in capsys.readouterr().out
