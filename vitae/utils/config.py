"""
Converter configuration loading.

Settings live in vitae/config/defaults.yaml and are resolved with OmegaConf,
so environment interpolations (e.g. the drive link) are expanded on load.
"""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "defaults.yaml"
CONFIG_PATH = Path(os.getenv("VITAE_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))


def load_converter_config(config_path: Path = None) -> Dict[str, Any]:
    """
    Load converter settings as a plain dict.

    Args:
        config_path: Optional path to a YAML config (defaults to VITAE_CONFIG_PATH
                     env variable, then the packaged defaults.yaml)

    Returns:
        Resolved config dict with "paths", "footer" and "site" sections

    Raises:
        FileNotFoundError: If the config file doesn't exist
    """
    if config_path is None:
        config_path = CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    defaults = OmegaConf.load(DEFAULT_CONFIG_PATH)
    if config_path.resolve() != DEFAULT_CONFIG_PATH:
        # Partial override files inherit anything they leave out
        defaults = OmegaConf.merge(defaults, OmegaConf.load(config_path))

    return OmegaConf.to_container(defaults, resolve=True)
