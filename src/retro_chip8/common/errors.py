"""
CHIP-8 コアが報告するエラーの定義。

全てのエラーは Chip8Error を基底とし、呼び出し元が一括で捕捉できるようにします。
また、既存のPython例外（IndexError, ValueError など）も継承するため、
バス層の境界外アクセスなどと同じ流儀で扱うことができます。
"""


# @intent:responsibility CHIP-8 コアが送出する全エラーの基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility どのマッピングにも一致しない命令ワードを報告します。
class InvalidOpcode(Chip8Error, ValueError):
    def __init__(self, opcode: int, address: int):
        super().__init__(f"Invalid opcode {opcode:04X} at {address:#05x}")
        self.opcode = opcode
        self.address = address


# @intent:responsibility 16段のコールスタックが満杯の状態でのCALLを報告します。
class StackOverflow(Chip8Error, RuntimeError):
    pass


# @intent:responsibility スタックポインタが0の状態でのRETを報告します。
class StackUnderflow(Chip8Error, RuntimeError):
    pass


# @intent:responsibility 計算されたアドレス（ジャンプ先、I+オフセット、転送範囲など）がメモリ範囲外であることを報告します。
class AddressOutOfRange(Chip8Error, IndexError):
    pass


# @intent:responsibility 0x200 からメモリ末尾までに収まらないプログラムのロードを報告します。
class ProgramTooLarge(Chip8Error, ValueError):
    pass
