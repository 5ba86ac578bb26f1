"""Configuration management for the hand recorder."""

from typing import Any, Optional
from pathlib import Path
import yaml
import json
from dataclasses import dataclass, asdict

from hand_recorder.core.table import TableConfig


@dataclass
class RecorderConfig:
    """Defaults used when a table file leaves something out."""
    # Table defaults
    table_size: str = '9-max'
    small_blind: float = 1
    big_blind: float = 2
    default_effective_stack: float = 100

    # Logging
    log_dir: str = 'logs'
    log_to_file: bool = False


class ConfigManager:
    """Manages configuration loading and saving."""

    @staticmethod
    def _read(path: Path) -> dict:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        # Load based on extension
        if path.suffix in ['.yaml', '.yml']:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        elif path.suffix == '.json':
            with open(path, 'r') as f:
                data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")

        return data or {}

    @staticmethod
    def _write(data: dict, path: Path):
        # Save based on extension
        if path.suffix in ['.yaml', '.yml']:
            with open(path, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        elif path.suffix == '.json':
            with open(path, 'w') as f:
                json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")

    @staticmethod
    def load_config(config_path: Path, config_class=RecorderConfig) -> Any:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file (YAML or JSON)
            config_class: Dataclass to load into

        Returns:
            Configuration instance
        """
        return config_class(**ConfigManager._read(Path(config_path)))

    @staticmethod
    def save_config(config: Any, config_path: Path):
        """Save a dataclass configuration to file."""
        ConfigManager._write(asdict(config), Path(config_path))

    @staticmethod
    def load_table_config(config_path: Path,
                          defaults: Optional[RecorderConfig] = None) -> TableConfig:
        """Load a table setup, filling gaps from ``defaults``.

        Args:
            config_path: YAML or JSON table file
            defaults: Recorder defaults for table size, blinds and stack

        Returns:
            TableConfig instance
        """
        defaults = defaults or RecorderConfig()
        data = ConfigManager._read(Path(config_path))
        data.setdefault('small_blind', defaults.small_blind)
        data.setdefault('big_blind', defaults.big_blind)
        return TableConfig.from_dict(
            data,
            table_size=defaults.table_size,
            default_stack=defaults.default_effective_stack,
        )

    @staticmethod
    def save_table_config(config: TableConfig, config_path: Path):
        ConfigManager._write(config.to_dict(), Path(config_path))

    @staticmethod
    def get_default_config_path() -> Path:
        """Get default configuration path."""
        return Path("configs/recorder_config.yaml")

    @staticmethod
    def create_default_configs(base_dir: Path = Path("configs")):
        """Create default configuration files.

        Args:
            base_dir: Directory to create configs in
        """
        base_dir.mkdir(exist_ok=True)

        recorder_config = RecorderConfig()
        ConfigManager.save_config(recorder_config, base_dir / "recorder_config.yaml")

        table = TableConfig.from_dict(
            {'small_blind': recorder_config.small_blind, 'big_blind': recorder_config.big_blind},
            table_size=recorder_config.table_size,
            default_stack=recorder_config.default_effective_stack,
        )
        ConfigManager.save_table_config(table, base_dir / "table_config.yaml")
