"""
Configuration management for CASPER
Handles loading and saving settings and priority-engine tuning
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional


CONFIG_DIR_ENV = "CASPER_CONFIG_DIR"


class Config:
    """Configuration manager for the priority engine and its surfaces"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to
                $CASPER_CONFIG_DIR, then ./config)
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_DIR_ENV)
            config_dir = Path(env_dir) if env_dir else Path(__file__).parent.parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.priority_file = self.config_dir / "priority.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.priority = self._load_json(self.priority_file, self._default_priority())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            # Keys added in newer versions fall back to their defaults
            merged = dict(default)
            merged.update(loaded)
            return merged
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default API settings"""
        return {
            "cors_origins": [
                "http://localhost:5173",  # Vite dev server
                "http://localhost:3000",
                "http://127.0.0.1:5173",
                "http://127.0.0.1:3000",
            ],
        }

    def _default_priority(self) -> Dict[str, Any]:
        """Default priority engine tuning"""
        return {
            "weights": {
                "urgency": 0.30,
                "importance": 0.25,
                "commitment": 0.25,
                "recency": 0.10,
                "effort": 0.10,
            },
            "max_items": 8,
            "past_event_cutoff_hours": 1.0,
            "imminent_event_window_hours": 2.0,
            "company_stale_days": 14,
            "high_importance_floor": 0.9,
            "calendar_upcoming_window_hours": 48,
            "inbox_urgent_window_hours": 4,
            "max_reading_items": 5,
            "quick_effort_minutes": 15,
            "medium_effort_minutes": 60,
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'priority')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "priority": self.priority,
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'priority')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "priority": (self.priority, self.priority_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)
