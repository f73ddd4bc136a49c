"""Configuration management"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any

from queue_monitor.alerts.trigger import Direction
from queue_monitor.metrics.metric_kind import MetricKind


def get_default_config() -> Dict[str, Any]:
    """Get default configuration"""
    return {
        'monitor': {
            'log_level': 'INFO',
            'log_file': None,
            'log_format': 'text',
            'poll_seconds': 30,
            'expire_seconds': 600,
            'dedup_per_trigger': True,
            'dispatch_workers': 4,
        },
        'rabbitmq': {
            'protocol': 'http',
            'host': 'localhost',
            'port': 15672,
            'username': 'guest',
            'password': 'guest',
            'vhost': None,
            'timeout': 10,
        },
        'slack': {
            'enabled': False,
            'webhook_url': '',
            'channel': 'alerts',
            'screen_name': 'Queue Monitor',
            'icon_url': None,
            'icon_emoji': None,
            'timeout': 10,
        },
        'webhook': {
            'enabled': False,
            'url': '',
            'method': 'POST',
            'headers': {},
            'timeout': 10,
        },
        'prometheus': {
            'enabled': False,
            'host': '0.0.0.0',
            'port': 9419,
        },
        'triggers': [],
        'triggers_file': None,
    }


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from file and environment variables

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        ValueError: If the file cannot be parsed or the result is invalid
    """
    config = get_default_config()

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        try:
            with open(config_path, 'r') as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
        if yaml_config:
            if not isinstance(yaml_config, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping")
            config = merge_configs(config, yaml_config)

    config = override_from_env(config)

    validate_config(config)

    return config


def merge_configs(base: Dict, override: Dict) -> Dict:
    """Recursively merge two configuration dictionaries"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def override_from_env(config: Dict) -> Dict:
    """Override configuration from environment variables"""

    # Monitor settings
    if 'LOG_LEVEL' in os.environ:
        config['monitor']['log_level'] = os.environ['LOG_LEVEL'].upper()
    if 'LOG_FILE' in os.environ:
        config['monitor']['log_file'] = os.environ['LOG_FILE']
    if 'LOG_FORMAT' in os.environ:
        config['monitor']['log_format'] = os.environ['LOG_FORMAT'].lower()
    if 'POLL_SECONDS' in os.environ:
        config['monitor']['poll_seconds'] = _env_number('POLL_SECONDS')
    if 'EXPIRE_SECONDS' in os.environ:
        config['monitor']['expire_seconds'] = _env_number('EXPIRE_SECONDS')

    # RabbitMQ connection
    for key in ['host', 'username', 'password', 'vhost']:
        env_key = f'RABBITMQ_{key.upper()}'
        if env_key in os.environ:
            config['rabbitmq'][key] = os.environ[env_key]
    if 'RABBITMQ_PORT' in os.environ:
        config['rabbitmq']['port'] = int(_env_number('RABBITMQ_PORT'))

    # Slack
    if 'SLACK_WEBHOOK_URL' in os.environ:
        config['slack']['webhook_url'] = os.environ['SLACK_WEBHOOK_URL']
        config['slack']['enabled'] = True

    return config


def _env_number(key: str) -> float:
    try:
        return float(os.environ[key])
    except ValueError:
        raise ValueError(f"Environment variable {key} must be a number, got {os.environ[key]!r}")


def validate_config(config: Dict):
    """
    Validate configuration values

    Raises:
        ValueError: If configuration is invalid
    """
    monitor = config['monitor']

    # Validate log level
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    log_level = str(monitor['log_level']).upper()
    if log_level not in valid_log_levels:
        raise ValueError(f"Invalid log level: {log_level}. Must be one of {valid_log_levels}")

    valid_formats = ['text', 'json']
    if monitor['log_format'] not in valid_formats:
        raise ValueError(f"Invalid log format: {monitor['log_format']}. Must be one of {valid_formats}")

    # Validate timings
    for key in ['poll_seconds', 'expire_seconds']:
        value = monitor[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"Invalid {key}: {value}. Must be a number >= 0")
    if monitor['poll_seconds'] == 0:
        raise ValueError("Invalid poll_seconds: 0. Must be > 0")

    workers = monitor['dispatch_workers']
    if not isinstance(workers, int) or workers < 1:
        raise ValueError(f"Invalid dispatch_workers: {workers}. Must be >= 1")

    # Validate RabbitMQ connection
    rabbitmq = config['rabbitmq']
    if rabbitmq['protocol'] not in ('http', 'https'):
        raise ValueError(f"Invalid RabbitMQ protocol: {rabbitmq['protocol']}. Must be http or https")
    if not rabbitmq.get('host'):
        raise ValueError("RabbitMQ host not set")
    port = int(rabbitmq['port'])
    if not (1 <= port <= 65535):
        raise ValueError(f"Invalid RabbitMQ port: {port}. Must be between 1 and 65535")

    # Validate channels
    if config['slack'].get('enabled') and not config['slack'].get('webhook_url'):
        raise ValueError("Slack channel enabled but webhook_url not set")

    if config['webhook'].get('enabled'):
        if not config['webhook'].get('url'):
            raise ValueError("Webhook channel enabled but url not set")
        method = str(config['webhook'].get('method', 'POST')).upper()
        if method not in ('POST', 'PUT'):
            raise ValueError(f"Invalid webhook method: {method}. Must be POST or PUT")

    if not config['slack'].get('enabled') and not config['webhook'].get('enabled'):
        import warnings
        warnings.warn("No notification channels enabled; alerts will only be logged")

    # Validate Prometheus port
    if config['prometheus'].get('enabled'):
        port = config['prometheus']['port']
        if not (1 <= port <= 65535):
            raise ValueError(f"Invalid Prometheus port: {port}. Must be between 1 and 65535")

    # Validate inline triggers
    triggers = config.get('triggers') or []
    if not isinstance(triggers, list):
        raise ValueError("triggers must be a list")
    for index, trigger in enumerate(triggers):
        validate_trigger_entry(trigger, index)


def validate_trigger_entry(entry: Any, index: int):
    """
    Validate a single trigger configuration entry

    Raises:
        ValueError: If the entry is invalid
    """
    if not isinstance(entry, dict):
        raise ValueError(f"Trigger #{index} must be a mapping")

    if 'type' not in entry:
        raise ValueError(f"Trigger #{index} has no type")
    MetricKind.from_name(entry['type'])

    threshold = entry.get('threshold')
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError(f"Trigger #{index} threshold must be a number, got {threshold!r}")

    direction = str(entry.get('direction', 'above')).lower()
    valid_directions = [d.value for d in Direction]
    if direction not in valid_directions:
        raise ValueError(f"Trigger #{index} direction must be one of {valid_directions}")

    queue = entry.get('queue')
    if queue is not None and not isinstance(queue, str):
        raise ValueError(f"Trigger #{index} queue must be a string")
