# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
"""
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from .main_window import MainWindow

# @intent:responsibility コマンドライン引数から起動時の構成を決定します。
# @intent:rationale .yaml/.yml はシステム構成として、それ以外はROMファイルとして扱います。
def build_config(args: List[str]) -> SystemConfig:
    if not args:
        return SystemConfig()
    path = args[0]
    if path.lower().endswith((".yaml", ".yml")):
        return ConfigLoader().load_from_file(path)
    return SystemConfig(rom=path)

# @intent:responsibility 起動時の構成を決定します。設定ファイルを読めない場合は既定の構成で起動します。
def load_startup_config(args: List[str]) -> SystemConfig:
    try:
        return build_config(args)
    except (OSError, ValueError) as e:
        print(f"Failed to load system config {args[0]}: {e}")
        return SystemConfig()

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    """
    アプリケーションのメイン関数。
    """
    argv = sys.argv if argv is None else argv
    app = QApplication(argv)
    main_win = MainWindow(load_startup_config(argv[1:]))
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
