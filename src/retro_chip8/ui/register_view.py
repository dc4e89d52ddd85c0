# src/retro_chip8/ui/register_view.py
"""
CHIP-8 のレジスタインスペクタ。
Chip8Cpu.get_register_layout() のグループ単位でラベルを並べ、
get_register_map() の値を16進で表示します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from retro_chip8.common.types import RegisterLayoutInfo
from retro_chip8.core.cpu import Chip8Cpu

GROUP_STYLE = """
    QGroupBox { font-weight: bold; border: 1px solid #2A2A2A; border-radius: 4px; margin-top: 18px; color: #EEE; }
    QGroupBox::title { subcontrol-origin: margin; left: 8px; padding: 0 4px; color: #66CC66; }
"""

# V0-VF を2列に並べる
COLUMNS = 2

def hex_digits(width: int) -> int:
    # I と PC は12bitアドレスなので3桁
    return 3 if width == 16 else (width + 3) // 4

# @intent:responsibility レジスタ値をグループごとに表示するウィジェット。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #101010; color: #C0C0C0;")
        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(4, 4, 4, 4)

        self._value_font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        self._labels: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._cpu: Optional[Chip8Cpu] = None

    # @intent:responsibility 表示対象のCPUを差し替え、レイアウトを作り直します。
    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self._rebuild()

    def _rebuild(self) -> None:
        while self._root.count():
            widget = self._root.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._labels.clear()
        self._digits.clear()

        for group in self._cpu.get_register_layout():
            self._root.addWidget(self._build_group(group))
        self._root.addStretch()

    def _build_group(self, group: RegisterLayoutInfo) -> QGroupBox:
        box = QGroupBox(group.group_name)
        box.setStyleSheet(GROUP_STYLE)
        grid = QGridLayout(box)
        grid.setContentsMargins(8, 14, 8, 8)
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(2)

        for index, reg in enumerate(group.registers):
            row, column = divmod(index, COLUMNS)
            digits = hex_digits(reg.width)

            name = QLabel(reg.name)
            name.setStyleSheet("font-weight: bold;")
            value = QLabel("0x" + "0" * digits)
            value.setFont(self._value_font)
            value.setStyleSheet("color: #FFFF66;")
            value.setAlignment(Qt.AlignRight | Qt.AlignVCenter)

            grid.addWidget(name, row, column * 2)
            grid.addWidget(value, row, column * 2 + 1)
            self._labels[reg.name] = value
            self._digits[reg.name] = digits
        return box

    # @intent:responsibility CPUの現在値でラベルを更新します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            label = self._labels.get(name)
            if label is not None:
                label.setText(f"0x{value:0{self._digits[name]}X}")

    def get_display_text(self, name: str) -> str:
        return self._labels[name].text()
