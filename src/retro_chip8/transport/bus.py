# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8 の 4KB アドレス空間を表します。
CPUは全てのメモリアクセスをこのバス経由で行い、1ステップ分のアクセス履歴が
Snapshot に添付されます。フォントやROMの初期配置は履歴に残さない load() を使います。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Tuple

from retro_chip8.common.errors import AddressOutOfRange


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 1回のメモリアクセス（アドレス・値・方向）を記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int # 転送された1バイト
    access_type: BusAccessType


# @intent:responsibility バスに割り当てるメモリデバイスの共通インターフェース。
# @intent:rationale アドレスはデバイス先頭からのオフセットとして渡されます。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass


# @intent:responsibility 生成時に大きさが確定する読み書き可能メモリ。
class RAM(Device):
    """
    bytearray で確保した固定長のメモリ。範囲外アクセスは AddressOutOfRange になります。
    """
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._size = size
        self._cells = bytearray(size)

    def _check_offset(self, address: int) -> None:
        if address < 0 or address >= self._size:
            raise AddressOutOfRange(f"Address {address} out of bounds for RAM of size {self._size}.")

    def read(self, address: int) -> int:
        self._check_offset(address)
        return self._cells[address]

    def write(self, address: int, data: int) -> None:
        self._check_offset(address)
        if data < 0 or data > 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._cells[address] = data

    def get_size(self) -> int:
        return self._size


class _Mapping(NamedTuple):
    start: int
    end: int # 末尾アドレス（この値を含む）
    device: Device


# @intent:responsibility アドレスをデバイスとオフセットに解決し、ステップ中のアクセスを記録します。
class Bus:
    def __init__(self):
        self._mappings: List[_Mapping] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility デバイスを [start_address, end_address] に割り当てます。
    # @intent:pre-condition RAMの場合、そのサイズは範囲の長さと一致している必要があります。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if start_address < 0 or end_address < start_address:
            raise ValueError(
                f"Invalid address range {start_address:#x}-{end_address:#x}: "
                "start must be non-negative and not after end."
            )
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")

        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"RAM of {device.get_size()} bytes cannot be mapped to a {span}-byte range "
                f"{start_address:#05x}-{end_address:#05x}."
            )
        self._mappings.append(_Mapping(start_address, end_address, device))

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for mapping in self._mappings:
            if mapping.start <= address <= mapping.end:
                return mapping.device, address - mapping.start
        raise AddressOutOfRange(f"Address {address:#06x} not mapped to any device.")

    # @intent:responsibility 割り当て済みの最上位アドレス。何も無ければ-1。
    def get_end_address(self) -> int:
        return max((mapping.end for mapping in self._mappings), default=-1)

    # @intent:responsibility address から length バイトが全て割り当て済みか確認します。
    # @intent:rationale 複数バイトに書き込む命令は、書き込み前にこれで範囲を確定させます。
    def check_range(self, address: int, length: int) -> None:
        if length > 0:
            self._resolve(address)
            self._resolve(address + length - 1)

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility 履歴を残さない読み出し（UI・テスト用）。
    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility 履歴を残さない書き込み（フォントとプログラムの配置用）。
    def load(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)

    # @intent:responsibility これまでのアクセス履歴を返し、履歴を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity
