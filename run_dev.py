#!/usr/bin/env python3
"""
Local runner: Gunicorn with the eventlet worker and code reload.

Flask's built-in server does not handle WebSocket upgrades, so development
goes through the same worker class as production.
"""

import os
import subprocess
import sys

GUNICORN_CMD = ['gunicorn', '--config', 'gunicorn.conf.py', '--reload', 'wsgi:app']


def main():
    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('PORT', '3000')

    from config_factory import load_config, ConfigError
    try:
        config = load_config()
    except ConfigError as e:
        print(f"Refusing to start, configuration is invalid: {e}")
        sys.exit(1)

    base_url = f"http://{config.host}:{config.port}"
    print(f"T-Shirt Showdown dev server on {base_url} (health: {base_url}/health), Ctrl+C to stop")

    try:
        subprocess.run(GUNICORN_CMD, check=True)
    except KeyboardInterrupt:
        print("\nStopped.")
    except subprocess.CalledProcessError as e:
        print(f"Gunicorn exited with status {e.returncode}")
        sys.exit(e.returncode)


if __name__ == '__main__':
    main()
