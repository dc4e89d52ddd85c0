import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from .models import SystemConfig, DisplayConfig, DEFAULT_KEYMAP

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        config = self._parse_config(data)
        # ROMパスは設定ファイルの位置からの相対パスとして解決する
        if config.rom and not Path(config.rom).is_absolute():
            config.rom = str(Path(path).parent / config.rom)
        return config

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("System config must be a mapping.")

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", 10), "display.scale"),
            foreground=str(display_data.get("foreground", "#FFFF00")),
            background=str(display_data.get("background", "#000000")),
        )

        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in data:
            keymap = {}
            for key_name, value in (data.get("keymap") or {}).items():
                index = self._parse_int(value)
                if not 0 <= index <= 0xF:
                    raise ValueError(f"Keypad index out of range for key '{key_name}': {value}")
                keymap[str(key_name).upper()] = index

        return SystemConfig(
            rom=data.get("rom"),
            instructions_per_frame=self._parse_positive(data.get("instructions_per_frame", 10), "instructions_per_frame"),
            timer_hz=self._parse_positive(data.get("timer_hz", 60), "timer_hz"),
            seed=self._parse_optional_int(data.get("seed")),
            display=display,
            keymap=keymap,
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_positive(self, value: Any, name: str) -> int:
        result = self._parse_int(value)
        if result <= 0:
            raise ValueError(f"'{name}' must be a positive integer: {value}")
        return result

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
