"""
Display View モジュール。

CHIP-8 の 64x32 フレームバッファを、指定倍率の矩形ピクセルとして描画します。
"""
from typing import List, Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from retro_chip8.core.state import DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:responsibility フレームバッファを描画する表示面を提供します。
class DisplayView(QWidget):
    def __init__(self, scale: int = 10, foreground: str = "#FFFF00", background: str = "#000000", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._framebuffer: List[List[bool]] = [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]
        self.setMinimumSize(DISPLAY_WIDTH * 2, DISPLAY_HEIGHT * 2)

    def set_scale(self, scale: int) -> None:
        self._scale = scale
        self.updateGeometry()
        self.update()

    def set_colors(self, foreground: str, background: str) -> None:
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self.update()

    # @intent:responsibility 表示するフレームバッファ（framebuffer[y][x]）を差し替え、再描画を要求します。
    def set_framebuffer(self, framebuffer: List[List[bool]]) -> None:
        self._framebuffer = framebuffer
        self.update()

    def get_framebuffer(self) -> List[List[bool]]:
        return self._framebuffer

    # @intent:responsibility 点灯しているピクセル数を返します（テスト・状態表示用）。
    def lit_pixel_count(self) -> int:
        return sum(row.count(True) for row in self._framebuffer)

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    def _pixel_size(self) -> int:
        # ウィジェットのサイズに合わせて整数倍で拡大する
        return max(1, min(self.width() // DISPLAY_WIDTH, self.height() // DISPLAY_HEIGHT))

    def paintEvent(self, event: Optional[QPaintEvent]) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)

        size = self._pixel_size()
        offset_x = (self.width() - DISPLAY_WIDTH * size) // 2
        offset_y = (self.height() - DISPLAY_HEIGHT * size) // 2

        for y, row in enumerate(self._framebuffer):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(offset_x + x * size, offset_y + y * size, size, size, self._foreground)
        painter.end()
