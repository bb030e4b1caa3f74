# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Platform-aware path resolution for config and state directories."""

import getpass
import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "proxyctl"


def _is_root() -> bool:
    """Return True if the current process is running as root."""
    try:
        return os.geteuid() == 0  # type: ignore[attr-defined]
    except AttributeError:
        return getpass.getuser() == "root"


def config_root() -> Path:
    """
    Base directory for proxy config layers (template.yml, class/, instance/).

    Priority:
      1. PROXYCTL_CONFIG_DIR
      2. if root   → /etc/proxyctl
         else      → platformdirs user config dir (~/.config/proxyctl)
    """
    env = os.getenv("PROXYCTL_CONFIG_DIR")
    if env:
        return Path(env).expanduser()

    if _is_root():
        return Path("/etc") / APP_NAME

    return Path(user_config_dir(APP_NAME))


def state_root() -> Path:
    """
    Writable state (debug log).

    Priority:
      1. PROXYCTL_STATE_DIR
      2. if root   → /var/lib/proxyctl
         else      → platformdirs user data dir (~/.local/share/proxyctl)
    """
    env = os.getenv("PROXYCTL_STATE_DIR")
    if env:
        return Path(env).expanduser()

    if _is_root():
        return Path("/var/lib") / APP_NAME

    return Path(user_data_dir(APP_NAME))
