# retro_chip8/core/cpu.py
"""
Core Layer (CHIP-8 CPU)

このモジュールは、CHIP-8 の状態管理と命令サイクル（フェッチ→デコード→PC更新→実行）の駆動を提供します。
具体的な命令の振る舞いは core.instructions パッケージに委譲されます。
ROMのロード、画面描画、実時間での実行ペース、物理キーボードの割り当ては呼び出し元の責務です。
"""
from random import Random
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.errors import Chip8Error, ProgramTooLarge
from retro_chip8.common.types import RegisterInfo, RegisterLayoutInfo
from retro_chip8.core.font import load_font
from retro_chip8.core.instructions import decode_opcode, execute_instruction
from retro_chip8.core.instructions.base import fetch_word
from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import Chip8CpuState, PROGRAM_START, KEY_COUNT, REGISTER_COUNT
from retro_chip8.transport.bus import Bus

# @intent:responsibility CHIP-8 CPUのエミュレーションロジックと、呼び出し元に公開する操作を提供します。
class Chip8Cpu:
    """
    CHIP-8 の仮想CPU。

    呼び出し元は step() を1ティックごとに呼び出し、tick_timers() を60Hzで呼び出します。
    キー入力は press_key()/release_key() で渡します。
    """
    # @intent:responsibility CPUの状態とバスへの参照を初期化し、フォントを低位メモリに配置します。
    # @intent:pre-condition `bus`は0x000-0xFFFをカバーするデバイスが登録済みである必要があります。
    def __init__(self, bus: Bus, rng: Optional[Random] = None):
        self._bus = bus
        # @intent:rationale CXNN の乱数源は注入可能とし、テストで決定的な結果を得られるようにします。
        self._rng = rng if rng is not None else Random()
        self._state: Chip8CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        load_font(self._bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility CPUをリセットし、初期状態に戻します。プログラムメモリは消去しません。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0
        load_font(self._bus)

    def get_state(self) -> Chip8CpuState:
        return self._state

    # @intent:responsibility 保存済みの状態を復元します。
    def restore_state(self, state: Chip8CpuState) -> None:
        self._state = state.copy()

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility プログラムのバイト列を 0x200 から書き込みます。
    # @intent:post-condition 収まらない場合はメモリを一切変更せず ProgramTooLarge を送出します。
    def load_program(self, data: bytes) -> None:
        capacity = self._bus.get_end_address() + 1 - PROGRAM_START
        if len(data) > capacity:
            raise ProgramTooLarge(
                f"Program of {len(data)} bytes does not fit in {capacity} bytes from {PROGRAM_START:#05x}."
            )
        for offset, byte in enumerate(data):
            self._bus.load(PROGRAM_START + offset, byte)

    def _fetch(self) -> int:
        return fetch_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    # @intent:responsibility 命令実行前にPCを命令長分進めます。
    # @intent:rationale 制御移行命令は実行時にPCを最終値で上書きするため、後からの加算で行き先がずれることはありません。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc += operation.length

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._rng)

    # @intent:responsibility キー押下がまだ届いていない FX0A の待機中なら、その状態のSnapshotを返します。
    # @intent:return 待機を継続する場合はSnapshot、通常実行に進める場合はNone。
    def _handle_wait(self, current_pc: int) -> Optional[Snapshot]:
        state = self._state
        if state.awaiting_key is None or state.pending_key is not None:
            return None
        # 待機中の命令は FX0A そのものなので、レジスタ番号から再構成する
        waiting_operation = self._decode(0xF00A | (state.awaiting_key << 8))
        return self._create_snapshot(current_pc, waiting_operation, count_cycle=False)

    # @intent:responsibility 届いたキーを V[X] に書き込み、FX0A の待機を終了します。
    # @intent:return 取り消し用の (X, キー, 書き込み前の V[X])。待機していなければNone。
    def _complete_wait(self) -> Optional[Tuple[int, int, int]]:
        state = self._state
        if state.awaiting_key is None:
            return None
        x, key = state.awaiting_key, state.pending_key
        previous = state.v[x]
        state.v[x] = key
        state.awaiting_key = None
        state.pending_key = None
        return x, key, previous

    def _undo_wait(self, completed: Tuple[int, int, int]) -> None:
        x, key, previous = completed
        self._state.v[x] = previous
        self._state.awaiting_key = x
        self._state.pending_key = key

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンで共通の実行フロー（ログクリア→待機判定→待機完了→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、Snapshotを返します。
        エラー時はPCとキー入力待ちの状態をステップ前に戻してから例外を送出します。
        """
        self._bus.get_and_clear_activity_log()

        wait_snapshot = self._handle_wait(self._state.pc)
        if wait_snapshot is not None:
            return wait_snapshot

        initial_pc = self._state.pc
        completed_wait = self._complete_wait()
        try:
            opcode = self._fetch()
            operation = self._decode(opcode)
            self._update_pc(operation)
            self._execute(operation)
        except Chip8Error:
            self._state.pc = initial_pc
            if completed_wait is not None:
                self._undo_wait(completed_wait)
            self._bus.get_and_clear_activity_log()
            raise

        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility 1サイクル実行し、キー入力待ちかどうかだけを返します。
    def run_cycle(self) -> bool:
        return self.step().awaiting_key

    def is_awaiting_key(self) -> bool:
        return self._state.awaiting_key is not None

    def _create_snapshot(self, initial_pc: int, operation: Operation, count_cycle: bool = True) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        if count_cycle:
            self._cycle_count += operation.cycle_count

        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, address=initial_pc, text=operation.text()),
            bus_activity=bus_activity,
            awaiting_key=self._state.awaiting_key is not None,
        )

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減算します（0で止まります）。
    # @intent:rationale 呼び出し元が命令実行レートとは独立に60Hzで呼び出します。
    def tick_timers(self) -> None:
        state = self._state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    # @intent:responsibility サウンドタイマーが動作中か（ビープを鳴らすべき期間か）を返します。
    def is_sound_active(self) -> bool:
        return self._state.sound_timer > 0

    def _check_key(self, key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key index {key} out of range 0-{KEY_COUNT - 1}.")

    # @intent:responsibility キー押下イベントを受け取り、キーパッドのラッチと FX0A の待機に反映します。
    def press_key(self, key: int) -> None:
        self._check_key(key)
        state = self._state
        was_pressed = state.keypad[key]
        state.keypad[key] = True
        if state.awaiting_key is not None and state.pending_key is None and not was_pressed:
            state.pending_key = key

    def release_key(self, key: int) -> None:
        self._check_key(key)
        self._state.keypad[key] = False

    # @intent:responsibility 描画用にフレームバッファの複製（framebuffer[y][x]）を返します。
    def get_framebuffer(self) -> List[List[bool]]:
        return [list(row) for row in self._state.framebuffer]

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [
                RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)
            ]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]
