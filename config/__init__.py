import os
import json
from pathlib import Path
from dotenv import load_dotenv
from .logging_config import setup_app_logging
import logging

# Load environment variables from .env file
load_dotenv()

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

PROJECT_ROOT = CONFIG_DIR.parent

# Persona and per-category instruction templates live next to config.json
PROMPTS_DIR = CONFIG_DIR / 'prompts'

# Load configuration from config.json
config_path = CONFIG_DIR / 'config.json'
with open(config_path, 'r', encoding='utf-8') as f:
    CONFIG = json.load(f)

CONFIG['project_root'] = str(PROJECT_ROOT) # Store as string for easier use

# Ensure optional sections exist so callers can use .get chains safely
for section in ('server', 'llm', 'site', 'memory'):
    CONFIG.setdefault(section, {})

CONFIG['paths'] = {
    'prompts_full_path': str(PROMPTS_DIR),
}


# --- Helper function to get config value from CONFIG or environment variable ---
def get_config_value(json_keys: list, env_var_name: str, default_value: any = None):
    """
    Retrieves a configuration value.
    Priority:
    1. Environment variable (if env_var_name is provided and variable is set).
    2. Value from CONFIG dictionary (using json_keys).
    3. default_value.
    """
    # Try environment variable first
    if env_var_name:
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            # Attempt to match type of default_value if it's int or bool
            if isinstance(default_value, bool):
                if env_value.lower() == 'true': return True
                if env_value.lower() == 'false': return False
            elif isinstance(default_value, int):
                try:
                    return int(env_value)
                except ValueError:
                    pass # Fall through to JSON or default if not a valid int
            elif isinstance(default_value, float):
                try:
                    return float(env_value)
                except ValueError:
                    pass
            return env_value # Return as string if no type match or not int/bool

    # Try from CONFIG dictionary (loaded from JSON)
    current_level = CONFIG
    try:
        for key in json_keys:
            current_level = current_level[key]
        if isinstance(current_level, (str, int, bool, float, list, dict)): # Check if it's a typical JSON type
             return current_level
    except (KeyError, TypeError):
        pass # Key not found or CONFIG structure not as expected, fall through to default

    # Fallback to default value
    return default_value


# The OPENROUTER_API_KEY secret is read and validated when the provider client is built,
# not here, so the package stays importable without secrets (tests, tooling).

# Resolve values that may be overridden from the environment once at startup
CONFIG['llm']['base_url'] = get_config_value(
    ['llm', 'base_url'], 'OPENROUTER_BASE_URL', 'https://openrouter.ai/api/v1'
)
CONFIG['llm']['timeout'] = get_config_value(['llm', 'timeout'], 'LLM_TIMEOUT', 30.0)
CONFIG['site']['url'] = get_config_value(['site', 'url'], 'SITE_URL', 'https://discord-ai-bot.com')
CONFIG['site']['name'] = get_config_value(['site', 'name'], 'SITE_NAME', 'Wren Ford Assistant')
CONFIG['server']['port'] = get_config_value(['server', 'port'], 'PORT', 3000)
CONFIG['memory']['max_history_length'] = get_config_value(
    ['memory', 'max_history_length'], 'MAX_HISTORY_LENGTH', 10
)


def validate_config():
    """Validate that the configuration settings required by the routing engine are present.

    Secrets are not checked here; the provider layer raises a clear error when the
    client is built without an API key.
    """
    required_sections = ['llm', 'memory']
    for section in required_sections:
        if section not in CONFIG:
            raise ValueError(f"Missing configuration section: {section}")

    if int(CONFIG['memory']['max_history_length']) <= 0:
        raise ValueError("memory.max_history_length must be a positive integer")

    if not PROMPTS_DIR.is_dir():
        raise FileNotFoundError(
            f"Prompt template directory not found: {PROMPTS_DIR}\n"
            f"Please ensure persona.txt and the per-category templates exist."
        )

# Validate configuration on module import
validate_config()

# --- Logging Configuration ---
# Environment variables take precedence over config.json.
CONFIG['logging'] = {
    'level': get_config_value(['logging', 'level'], 'LOG_LEVEL', 'INFO'),
    'file_path': get_config_value(['logging', 'file_path'], 'LOG_FILE_PATH', 'logs/wren_ford.log'),
    'max_bytes': get_config_value(['logging', 'max_bytes'], 'LOG_MAX_BYTES', 5*1024*1024), # 5MB
    'backup_count': get_config_value(['logging', 'backup_count'], 'LOG_BACKUP_COUNT', 3),
    'date_format': get_config_value(
        ['logging', 'date_format'],
        'LOG_DATE_FORMAT',
        '%Y-%m-%d %H:%M:%S'
    )
}

# --- Setup Application Logging ---
setup_app_logging(config=CONFIG.get('logging'))

config_init_logger = logging.getLogger(__name__) # Get logger for this module AFTER logging is setup
config_init_logger.info("[config_init] Logging initialized from config/__init__.py using setup_app_logging.")
