"""Configuration loader for HelpScout Redirect Sync"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv


DEFAULT_API_URL = "https://docsapi.helpscout.net/v1/"

# Maps YAML settings keys to Config fields
_SETTINGS_KEYS = {
    'api_url': 'api_url',
    'api_key': 'api_key',
    'site_id': 'site_id',
    'permalink_template': 'permalink_template',
    'store_file': 'store_file',
    'log_level': 'log_level',
    'data_dir': 'data_dir',
    'webhook_secret': 'webhook_secret',
}


@dataclass
class Config:
    """Main configuration class"""
    # HelpScout Docs API settings
    api_key: str
    site_id: str
    api_url: str = DEFAULT_API_URL

    # CMS collaborators
    permalink_template: str = ""
    store_file: str = "./data/metadata.json"

    # Web settings
    web_host: str = "0.0.0.0"
    web_port: int = 8080
    webhook_secret: str = ""  # For HMAC signature verification

    # General settings
    log_level: str = "INFO"
    data_dir: str = "./data"


def _load_settings_file(settings_file: Path) -> Dict[str, Any]:
    """Read the optional YAML settings file"""
    if not settings_file.exists():
        return {}

    with open(settings_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    settings = data.get('helpscout', data)
    return {
        field_name: settings[key]
        for key, field_name in _SETTINGS_KEYS.items()
        if settings.get(key) is not None
    }


def load_config(env_file: Optional[str] = None, settings_file: Optional[str] = None) -> Config:
    """
    Load configuration from a YAML settings file and environment variables.

    Environment variables take precedence over the settings file.

    Args:
        env_file: Path to .env file (optional, defaults to .env in current dir)
        settings_file: Path to settings YAML (optional, defaults to config/settings.yaml)

    Returns:
        Config object with all settings loaded
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    if settings_file is None:
        settings_path = Path(__file__).parent.parent / "config" / "settings.yaml"
    else:
        settings_path = Path(settings_file)

    settings = _load_settings_file(settings_path)

    def _get(env_name: str, field_name: str, default: str = '') -> str:
        value = os.getenv(env_name)
        if value:
            return value
        return str(settings.get(field_name, default))

    return Config(
        api_url=_get('HELPSCOUT_API_URL', 'api_url', DEFAULT_API_URL),
        api_key=_get('HELPSCOUT_API_KEY', 'api_key'),
        site_id=_get('HELPSCOUT_SITE_ID', 'site_id'),

        permalink_template=_get('PERMALINK_TEMPLATE', 'permalink_template'),
        store_file=_get('METADATA_STORE_FILE', 'store_file', './data/metadata.json'),

        web_host=os.getenv('WEB_HOST', '0.0.0.0'),
        web_port=int(os.getenv('WEB_PORT', '8080')),
        webhook_secret=_get('WEBHOOK_SECRET', 'webhook_secret'),

        log_level=_get('LOG_LEVEL', 'log_level', 'INFO'),
        data_dir=_get('DATA_DIR', 'data_dir', './data'),
    )


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not config.api_url:
        errors.append("HELPSCOUT_API_URL is required")

    if not config.api_key:
        errors.append("HELPSCOUT_API_KEY is required")

    if not config.site_id:
        errors.append("HELPSCOUT_SITE_ID is required")

    if not config.permalink_template:
        errors.append("PERMALINK_TEMPLATE is required")
    elif '{record_id}' not in config.permalink_template:
        errors.append("PERMALINK_TEMPLATE must contain '{record_id}'")

    return errors
