# src/retro_chip8/core/instructions/maps.py
"""
命令ワードと命令実装のマッピング定義。
"""
from retro_chip8.core.snapshot import OpKind
from . import load
from . import alu
from . import control
from . import display

# @intent:map 先頭ニブルからデコード関数へのマッピングテーブル。
# 0x0, 0x8, 0xE, 0xF の各ファミリは下位のフィールドでさらに振り分けます。
DECODE_MAP = {
    0x1: control.decode_jp,
    0x2: control.decode_call,
    0x3: control.decode_se_imm,
    0x4: control.decode_sne_imm,
    0x5: control.decode_se_reg,
    0x6: alu.decode_ld_imm,
    0x7: alu.decode_add_imm,
    0x9: control.decode_sne_reg,
    0xA: load.decode_ld_i,
    0xB: control.decode_jp_v0,
    0xC: alu.decode_rnd,
    0xD: display.decode_drw,
}

# @intent:map 0x0 ファミリ: 命令ワード全体で一致させます。
SYSTEM_DECODE_MAP = {
    0x00E0: display.decode_cls,
    0x00EE: control.decode_ret,
}

# @intent:map 0x8 ファミリ: 下位ニブルで振り分けます。
ALU_DECODE_MAP = {
    0x0: alu.decode_ld_reg,
    0x1: alu.decode_or,
    0x2: alu.decode_and,
    0x3: alu.decode_xor,
    0x4: alu.decode_add_reg,
    0x5: alu.decode_sub,
    0x6: alu.decode_shr,
    0x7: alu.decode_subn,
    0xE: alu.decode_shl,
}

# @intent:map 0xE ファミリ: 下位バイトで振り分けます。
KEY_DECODE_MAP = {
    0x9E: control.decode_skp,
    0xA1: control.decode_sknp,
}

# @intent:map 0xF ファミリ: 下位バイトで振り分けます。
MISC_DECODE_MAP = {
    0x07: load.decode_ld_vx_dt,
    0x0A: load.decode_ld_vx_k,
    0x15: load.decode_ld_dt_vx,
    0x18: load.decode_ld_st_vx,
    0x1E: load.decode_add_i_vx,
    0x29: load.decode_ld_f_vx,
    0x33: load.decode_ld_b_vx,
    0x55: load.decode_ld_mem_vx,
    0x65: load.decode_ld_vx_mem,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。OpKind.UNKNOWN は含みません。
EXECUTE_MAP = {
    # Display
    OpKind.CLS: display.execute_cls,
    OpKind.DRW: display.execute_drw,

    # Control
    OpKind.RET: control.execute_ret,
    OpKind.JP: control.execute_jp,
    OpKind.CALL: control.execute_call,
    OpKind.SE_IMM: control.execute_se_imm,
    OpKind.SNE_IMM: control.execute_sne_imm,
    OpKind.SE_REG: control.execute_se_reg,
    OpKind.SNE_REG: control.execute_sne_reg,
    OpKind.JP_V0: control.execute_jp_v0,
    OpKind.SKP: control.execute_skp,
    OpKind.SKNP: control.execute_sknp,

    # ALU
    OpKind.LD_IMM: alu.execute_ld_imm,
    OpKind.ADD_IMM: alu.execute_add_imm,
    OpKind.LD_REG: alu.execute_ld_reg,
    OpKind.OR: alu.execute_or,
    OpKind.AND: alu.execute_and,
    OpKind.XOR: alu.execute_xor,
    OpKind.ADD_REG: alu.execute_add_reg,
    OpKind.SUB: alu.execute_sub,
    OpKind.SHR: alu.execute_shr,
    OpKind.SUBN: alu.execute_subn,
    OpKind.SHL: alu.execute_shl,
    OpKind.RND: alu.execute_rnd,

    # Load
    OpKind.LD_I: load.execute_ld_i,
    OpKind.LD_VX_DT: load.execute_ld_vx_dt,
    OpKind.LD_VX_K: load.execute_ld_vx_k,
    OpKind.LD_DT_VX: load.execute_ld_dt_vx,
    OpKind.LD_ST_VX: load.execute_ld_st_vx,
    OpKind.ADD_I_VX: load.execute_add_i_vx,
    OpKind.LD_F_VX: load.execute_ld_f_vx,
    OpKind.LD_B_VX: load.execute_ld_b_vx,
    OpKind.LD_MEM_VX: load.execute_ld_mem_vx,
    OpKind.LD_VX_MEM: load.execute_ld_vx_mem,
}
