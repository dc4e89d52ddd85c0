# tests/core/test_snapshot.py
"""
retro_chip8.core.snapshotモジュールの単体テスト。
"""
import pytest
from retro_chip8.core.state import Chip8CpuState
from retro_chip8.core.snapshot import OpKind, Operation, Metadata, Snapshot

# @intent:test_suite 命令記述とスナップショットの不変データ構造を検証します。

class TestOperation:
    def test_operation_fields(self):
        op = Operation(opcode=0xD125, kind=OpKind.DRW, mnemonic="DRW", operands=["V1", "V2", "#5"],
                       x=1, y=2, n=5, nn=0x25, nnn=0x125)
        assert op.opcode_hex == "D125"
        assert op.nibbles == (0xD, 0x1, 0x2, 0x5)
        assert op.length == 2
        assert op.text() == "DRW V1, V2, #5"

    def test_operation_text_without_operands(self):
        op = Operation(opcode=0x00E0, kind=OpKind.CLS, mnemonic="CLS")
        assert op.text() == "CLS"

    def test_operation_immutability(self):
        op = Operation(opcode=0x00E0, kind=OpKind.CLS, mnemonic="CLS")
        with pytest.raises(AttributeError):
            op.mnemonic = "RET"

class TestSnapshot:
    def test_snapshot_defaults(self):
        snapshot = Snapshot(
            state=Chip8CpuState(),
            operation=Operation(opcode=0x00E0, kind=OpKind.CLS, mnemonic="CLS"),
            metadata=Metadata(cycle_count=1, address=0x200, text="CLS"),
        )
        assert snapshot.bus_activity == []
        assert snapshot.awaiting_key is False
        with pytest.raises(AttributeError):
            snapshot.awaiting_key = True
