"""Main entry point for the queue monitor"""

import sys
import argparse

from queue_monitor import __version__
from queue_monitor.config.settings import load_config
from queue_monitor.utils.logger import setup_logger
from queue_monitor.monitor import Monitor


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description='RabbitMQ queue monitor with threshold alerts'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        default='config.yaml',
        help='Path to configuration file (YAML)'
    )

    parser.add_argument(
        '--log-level',
        '-l',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Override log level'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='Run a single check and exit'
    )

    parser.add_argument(
        '--version',
        '-v',
        action='version',
        version=f'Queue Monitor v{__version__}'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    try:
        config = load_config(args.config)

        # Override log level from command line
        if args.log_level:
            config['monitor']['log_level'] = args.log_level

        logger = setup_logger(config)
        logger.info(f"Read config file from {args.config}")

        monitor = Monitor(config)
        if args.once:
            monitor.run_once()
        else:
            monitor.start()

        return 0

    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        return 0
    except (OSError, ValueError) as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
