# src/retro_chip8/ui/main_window.py
"""
Retro CHIP-8 のメインウィンドウ。
表示面とレジスタインスペクタを持ち、QTimer で60Hzのフレームを刻んでCPUを駆動します。
"""
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QKeyEvent, QCloseEvent
from PySide6.QtCore import Qt, QTimer, QElapsedTimer, Slot

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import SystemConfig
from .display_view import DisplayView
from .register_view import RegisterView

# 停止から復帰した直後などに、溜まったフレームを一度に実行する上限
MAX_CATCH_UP_FRAMES = 4

# @intent:responsibility 実行開始からの経過時間までに実行されているべきフレーム数を返します。
def frames_due(elapsed_ms: int, timer_hz: int) -> int:
    return elapsed_ms * timer_hz // 1000

PALETTE = {
    QPalette.Window: QColor(24, 24, 24),
    QPalette.WindowText: QColor(210, 210, 210),
    QPalette.Base: QColor(16, 16, 16),
    QPalette.Text: QColor(210, 210, 210),
    QPalette.Button: QColor(48, 48, 48),
    QPalette.ButtonText: QColor(210, 210, 210),
    QPalette.Highlight: QColor(102, 204, 102),
    QPalette.HighlightedText: QColor(0, 0, 0),
}

# @intent:responsibility 表示面・インスペクタ・実行制御を組み立て、CPUを実時間で駆動します。
class MainWindow(QMainWindow):
    """
    1フレームごとに instructions_per_frame 命令を実行し、その後で遅延タイマーと
    サウンドタイマーを1回減算します。キー入力待ちになったフレームでは残りの命令を実行しません。
    フレーム数は実行開始からの経過時間で決めるため、QTimer の間隔の丸めでタイマーがずれることはありません。
    """
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Retro CHIP-8")

        self._config = config or SystemConfig()
        self._keymap: Dict[str, int] = {}
        self._rom_data: Optional[bytes] = None
        self._frame_timer = QTimer(self)
        self._frame_timer.setTimerType(Qt.PreciseTimer)
        self._frame_timer.timeout.connect(self._on_frame_timer)
        self._clock = QElapsedTimer()
        self._frames_run = 0

        self._apply_theme()
        self._create_display()
        self._create_register_dock()
        self._create_toolbar()
        self._create_menus()
        self._setup_initial_backend(self._config)
        self._update_ui_state(False)

    # @intent:responsibility 起動時の設定でシステムを構築します。ROMや設定に問題があればROM無しで起動します。
    def _setup_initial_backend(self, config: SystemConfig):
        try:
            self._setup_backend(config)
        except (OSError, ValueError) as e:
            print(f"Failed to load {config.rom}: {e}")
            self._setup_backend(replace(config, rom=None))
            self.status_label.setText(f"Failed to load ROM: {e}")

    # @intent:responsibility 設定からCPUとバスを作り直し、各ビューへ接続します。
    # @intent:post-condition 構築に失敗した場合は例外を送出し、現在のCPUと設定はそのまま残ります。
    def _setup_backend(self, config: SystemConfig):
        builder = SystemBuilder()
        cpu, bus = builder.build_system(config)
        rom_data = Path(config.rom).read_bytes() if config.rom else None

        self._frame_timer.stop()
        self.cpu, self.bus = cpu, bus
        self._keymap = builder.build_keymap(config)
        self._config = config
        self._rom_data = rom_data

        self._frame_timer.setInterval(max(1, 1000 // config.timer_hz))
        self.display_view.set_scale(config.display.scale)
        self.display_view.set_colors(config.display.foreground, config.display.background)
        self.register_view.set_cpu(cpu)
        self._refresh_views()

    def _create_display(self):
        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)
        self.status_label = QLabel("Load a ROM to start")
        self.statusBar().addWidget(self.status_label)

    def _create_register_dock(self):
        self.register_view = RegisterView()
        dock = QDockWidget("Registers", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    def _make_action(self, text: str, slot: Callable, shortcut: Optional[str] = None) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(shortcut)
        action.triggered.connect(slot)
        return action

    def _create_toolbar(self):
        self.run_action = self._make_action("Run", self._run, "F5")
        self.stop_action = self._make_action("Stop", self._stop, "Shift+F5")
        self.step_action = self._make_action("Step", self._step, "F10")
        self.reset_action = self._make_action("Reset", self._reset)

        toolbar = QToolBar("Execution")
        for action in (self.run_action, self.stop_action, self.step_action, self.reset_action):
            toolbar.addAction(action)
        self.addToolBar(toolbar)

    def _create_menus(self):
        self.load_rom_action = self._make_action("Load ROM...", self._load_rom_file, "Ctrl+O")
        self.load_config_action = self._make_action("Load System Config...", self._load_system_config)
        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction(self.load_rom_action)
        file_menu.addAction(self.load_config_action)

    # @intent:responsibility 実行中はファイル操作とステップ実行を無効にします。
    def _update_ui_state(self, is_running: bool):
        for action in (self.load_rom_action, self.load_config_action, self.run_action, self.step_action):
            action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    def is_running(self) -> bool:
        return self._frame_timer.isActive()

    @Slot()
    def _run(self):
        self._update_ui_state(True)
        self.status_label.setText("Running...")
        self._clock.start()
        self._frames_run = 0
        self._frame_timer.start()

    @Slot()
    def _stop(self):
        self._frame_timer.stop()
        self._update_ui_state(False)
        self.status_label.setText(f"Stopped at PC {self.cpu.get_state().pc:#05x}")

    # @intent:responsibility 1命令だけ実行します。タイマーは減算しません。
    @Slot()
    def _step(self):
        try:
            snapshot = self.cpu.step()
        except Chip8Error as e:
            self._halt_on_error(e)
            return
        if snapshot.awaiting_key:
            self.status_label.setText("Waiting for key...")
        else:
            self.status_label.setText(f"{snapshot.metadata.address:03X}: {snapshot.metadata.text}")
        self._refresh_views()

    @Slot()
    def _on_frame_timer(self):
        self._advance_to(self._clock.elapsed())

    # @intent:responsibility 経過時間 elapsed_ms までに必要なフレームを実行します。
    # @intent:rationale QTimer の間隔はミリ秒単位に丸められるため、1回の発火で0または複数フレームを実行して平均を timer_hz に合わせます。
    def _advance_to(self, elapsed_ms: int):
        due = frames_due(elapsed_ms, self._config.timer_hz)
        for _ in range(min(due - self._frames_run, MAX_CATCH_UP_FRAMES)):
            self._run_frame()
            if not self.is_running():
                return
        # 上限を超えた分は取り戻さない
        self._frames_run = due

    # @intent:responsibility 1フレーム分の命令を実行し、タイマーを1回進めます。
    @Slot()
    def _run_frame(self):
        try:
            for _ in range(self._config.instructions_per_frame):
                if self.cpu.run_cycle():
                    break
        except Chip8Error as e:
            self._halt_on_error(e)
            return
        self.cpu.tick_timers()
        self._refresh_views()

    def _halt_on_error(self, error: Chip8Error):
        self._frame_timer.stop()
        self._update_ui_state(False)
        self.status_label.setText(f"Halted: {error}")
        print(f"Execution halted: {error}")
        self._refresh_views()

    # @intent:responsibility CPUを初期状態に戻し、最後に読み込んだROMを再配置します。
    @Slot()
    def _reset(self):
        self.cpu.reset()
        if self._rom_data:
            self.cpu.load_program(self._rom_data)
        self.status_label.setText("Reset")
        self._refresh_views()

    def _refresh_views(self):
        self.display_view.set_framebuffer(self.cpu.get_framebuffer())
        self.register_view.update_registers()

    @Slot()
    def _load_rom_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if not file_name:
            return
        try:
            self.load_rom(file_name)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Load ROM", f"Failed to load ROM file: {e}")

    # @intent:responsibility 現在の設定のままROMだけを差し替えます。CPUは作り直されます。
    # @intent:post-condition 失敗した場合は例外を送出し、設定・CPU・再ロード用のROMデータは以前のままです。
    def load_rom(self, file_name: str) -> None:
        self._setup_backend(replace(self._config, rom=file_name))
        self._update_ui_state(False)
        self.status_label.setText(f"Loaded {Path(file_name).name}")

    @Slot()
    def _load_system_config(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open System Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if not file_name:
            return
        try:
            self.load_config(file_name)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "System Config", f"Failed to load system config: {e}")

    def load_config(self, file_name: str) -> None:
        self._setup_backend(ConfigLoader().load_from_file(file_name))
        self._update_ui_state(False)
        self.status_label.setText(f"Config loaded from {Path(file_name).name}")

    def _keypad_index(self, event: QKeyEvent) -> Optional[int]:
        return self._keymap.get(event.text().upper())

    # @intent:responsibility 割り当てのあるキーをキーパッドへ渡します。オートリピートは無視します。
    def keyPressEvent(self, event: QKeyEvent):
        index = self._keypad_index(event)
        if index is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.press_key(index)

    def keyReleaseEvent(self, event: QKeyEvent):
        index = self._keypad_index(event)
        if index is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.release_key(index)

    def _apply_theme(self):
        palette = QPalette()
        for role, color in PALETTE.items():
            palette.setColor(role, color)
        QApplication.setPalette(palette)
        self.setStyleSheet("""
            QMainWindow, QToolBar { background-color: #181818; border: none; }
            QDockWidget::title { text-align: left; background: #0C0C0C; padding: 4px; font-weight: bold; }
        """)

    def closeEvent(self, event: QCloseEvent):
        self._frame_timer.stop()
        event.accept()
