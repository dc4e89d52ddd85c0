# tests/core/test_decoder.py
"""
命令ワードのデコード（retro_chip8.core.instructions.decode_opcode）の単体テスト。
"""
import pytest

from retro_chip8.core.instructions import decode_opcode
from retro_chip8.core.snapshot import OpKind

# @intent:test_suite 全35命令の振り分けと、各フィールドの切り出しを検証します。

@pytest.mark.parametrize("opcode, kind", [
    (0x00E0, OpKind.CLS),
    (0x00EE, OpKind.RET),
    (0x1234, OpKind.JP),
    (0x2345, OpKind.CALL),
    (0x3A12, OpKind.SE_IMM),
    (0x4A12, OpKind.SNE_IMM),
    (0x5AB0, OpKind.SE_REG),
    (0x6A12, OpKind.LD_IMM),
    (0x7A12, OpKind.ADD_IMM),
    (0x8AB0, OpKind.LD_REG),
    (0x8AB1, OpKind.OR),
    (0x8AB2, OpKind.AND),
    (0x8AB3, OpKind.XOR),
    (0x8AB4, OpKind.ADD_REG),
    (0x8AB5, OpKind.SUB),
    (0x8AB6, OpKind.SHR),
    (0x8AB7, OpKind.SUBN),
    (0x8ABE, OpKind.SHL),
    (0x9AB0, OpKind.SNE_REG),
    (0xA123, OpKind.LD_I),
    (0xB123, OpKind.JP_V0),
    (0xCA12, OpKind.RND),
    (0xDAB5, OpKind.DRW),
    (0xEA9E, OpKind.SKP),
    (0xEAA1, OpKind.SKNP),
    (0xFA07, OpKind.LD_VX_DT),
    (0xFA0A, OpKind.LD_VX_K),
    (0xFA15, OpKind.LD_DT_VX),
    (0xFA18, OpKind.LD_ST_VX),
    (0xFA1E, OpKind.ADD_I_VX),
    (0xFA29, OpKind.LD_F_VX),
    (0xFA33, OpKind.LD_B_VX),
    (0xFA55, OpKind.LD_MEM_VX),
    (0xFA65, OpKind.LD_VX_MEM),
])
def test_decode_kind(opcode, kind):
    assert decode_opcode(opcode).kind == kind

# @intent:test_case_unknown 定義外の組み合わせはUNKNOWNとしてデコードされることを検証します。
@pytest.mark.parametrize("opcode", [
    0x0000, 0x0123, 0x00E1, 0x00FF, 0x5AB1, 0x9AB1, 0x8AB8, 0x8ABF, 0xEA00, 0xEA9F, 0xFA00, 0xFA66,
])
def test_decode_unknown(opcode):
    op = decode_opcode(opcode)
    assert op.kind == OpKind.UNKNOWN
    assert op.mnemonic == "UNKNOWN"

def test_decode_fields():
    op = decode_opcode(0xD3A7)
    assert op.opcode == 0xD3A7
    assert op.x == 0x3
    assert op.y == 0xA
    assert op.n == 0x7
    assert op.nn == 0xA7
    assert op.nnn == 0x3A7
    assert op.length == 2

def test_decode_operands_text():
    assert decode_opcode(0x6A05).text() == "LD VA, #05"
    assert decode_opcode(0xA2F0).text() == "LD I, $2F0"
    assert decode_opcode(0xB300).text() == "JP V0, $300"
    assert decode_opcode(0xF30A).text() == "LD V3, K"
    assert decode_opcode(0xF155).text() == "LD [I], V1"
    assert decode_opcode(0x00EE).text() == "RET"
