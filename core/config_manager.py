"""
Configuration management for the layout engine.

This module handles saving and loading engine configurations as JSON,
plus a download link for the playground app.
"""

import base64
import json
from datetime import datetime
from typing import Tuple

from models import LayoutEngineConfig


class LayoutConfigManager:
    """Manages saving and loading of layout engine configurations"""

    @staticmethod
    def save_config(config: LayoutEngineConfig, name: str) -> str:
        """Save engine configuration to JSON string"""
        config_data = {
            "name": name,
            "config": config.to_dict(),
            "saved_at": datetime.now().isoformat(),
        }
        return json.dumps(config_data, indent=2)

    @staticmethod
    def load_config(config_json: str) -> Tuple[LayoutEngineConfig, str]:
        """Load engine configuration from JSON string

        Raises:
            ValueError: If the payload is not a saved configuration or its
                constraints are out of range
        """
        try:
            config_data = json.loads(config_json)
            config = LayoutEngineConfig.from_dict(config_data["config"])
            name = config_data["name"]
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid layout configuration: {e}") from e

        return config, name

    @staticmethod
    def create_download_link(config_json: str, filename: str) -> str:
        """Create download link for configuration"""
        b64 = base64.b64encode(config_json.encode()).decode()
        return f'<a href="data:application/json;base64,{b64}" download="{filename}">Download Configuration</a>'
