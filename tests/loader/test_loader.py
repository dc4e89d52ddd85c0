# tests/loader/test_loader.py
"""
retro_chip8.loader.loaderモジュールの単体テスト。
生バイナリROMのロード機能を検証します。
"""
import pytest

from retro_chip8.common.errors import ProgramTooLarge
from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.state import PROGRAM_START
from retro_chip8.loader.loader import RomLoader
from retro_chip8.transport.bus import Bus, RAM

# @intent:test_suite ROMローダー機能の検証。

class TestRomLoader:
    """
    RomLoaderの単体テスト。
    """

    @pytest.fixture
    def setup_loader(self, tmp_path):
        bus = Bus()
        ram = RAM(0x1000)
        bus.register_device(0x000, 0xFFF, ram)
        cpu = Chip8Cpu(bus)
        return RomLoader(), cpu, ram, tmp_path

    def test_load_rom_at_program_start(self, setup_loader):
        loader, cpu, ram, tmp_path = setup_loader
        rom_file = tmp_path / "test.ch8"
        rom_file.write_bytes(bytes([0x60, 0x05, 0x70, 0x03]))

        size = loader.load_rom(str(rom_file), cpu)

        assert size == 4
        assert ram.read(PROGRAM_START) == 0x60
        assert ram.read(PROGRAM_START + 3) == 0x03

    def test_loaded_rom_runs(self, setup_loader):
        loader, cpu, _, tmp_path = setup_loader
        rom_file = tmp_path / "add.ch8"
        rom_file.write_bytes(bytes([0x60, 0x05, 0x70, 0x03]))
        loader.load_rom(rom_file, cpu)

        cpu.step()
        cpu.step()
        assert cpu.get_state().v[0] == 8

    def test_load_empty_rom(self, setup_loader):
        loader, cpu, _, tmp_path = setup_loader
        rom_file = tmp_path / "empty.ch8"
        rom_file.write_bytes(b"")
        with pytest.raises(ValueError, match="empty"):
            loader.load_rom(str(rom_file), cpu)

    def test_load_too_large_rom(self, setup_loader):
        loader, cpu, ram, tmp_path = setup_loader
        rom_file = tmp_path / "huge.ch8"
        rom_file.write_bytes(bytes([0xFF]) * 3585)
        with pytest.raises(ProgramTooLarge):
            loader.load_rom(str(rom_file), cpu)
        assert ram.read(PROGRAM_START) == 0x00

    def test_load_missing_file(self, setup_loader):
        loader, cpu, _, tmp_path = setup_loader
        with pytest.raises(FileNotFoundError):
            loader.load_rom(str(tmp_path / "missing.ch8"), cpu)
