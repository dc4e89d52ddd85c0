import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QColor

from retro_chip8.ui.display_view import DisplayView
from retro_chip8.core.state import DISPLAY_WIDTH, DISPLAY_HEIGHT

class TestDisplayView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def test_init(self):
        view = DisplayView()
        self.assertEqual(len(view.get_framebuffer()), DISPLAY_HEIGHT)
        self.assertEqual(len(view.get_framebuffer()[0]), DISPLAY_WIDTH)
        self.assertEqual(view.lit_pixel_count(), 0)

    def test_size_hint_follows_scale(self):
        view = DisplayView(scale=5)
        self.assertEqual(view.sizeHint().width(), 320)
        self.assertEqual(view.sizeHint().height(), 160)
        view.set_scale(12)
        self.assertEqual(view.sizeHint().width(), 768)

    def test_set_framebuffer(self):
        view = DisplayView()
        framebuffer = [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]
        framebuffer[0][0] = True
        framebuffer[31][63] = True
        view.set_framebuffer(framebuffer)
        self.assertEqual(view.lit_pixel_count(), 2)

    def test_paint_lit_and_unlit_pixels(self):
        """
        点灯ピクセルが前景色、それ以外が背景色で描画されることを検証します。
        """
        view = DisplayView(scale=10, foreground="#00FF00", background="#000000")
        view.resize(DISPLAY_WIDTH * 10, DISPLAY_HEIGHT * 10)
        framebuffer = [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]
        framebuffer[0][0] = True
        view.set_framebuffer(framebuffer)

        image = view.grab().toImage()
        self.assertEqual(image.pixelColor(5, 5), QColor("#00FF00"))
        self.assertEqual(image.pixelColor(15, 5), QColor("#000000"))

    def test_set_colors(self):
        view = DisplayView()
        view.resize(DISPLAY_WIDTH * 4, DISPLAY_HEIGHT * 4)
        view.set_colors("#FFFFFF", "#202020")
        image = view.grab().toImage()
        self.assertEqual(image.pixelColor(1, 1), QColor("#202020"))

if __name__ == '__main__':
    unittest.main()
