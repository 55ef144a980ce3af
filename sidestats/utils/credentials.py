"""Bootstrap the Google service key file from an environment variable.

On PaaS hosts the service account JSON can't be committed to git.  Paste
the JSON into GOOGLE_SERVICE_KEY_JSON (or GOOGLE_SERVICE_KEY_FILE when the
value looks like JSON) and it is written to the configured key file path at
startup.
"""
import json
import os

from sidestats.config import get_settings
from sidestats.utils.logger import log

_ENV_VARS = ("GOOGLE_SERVICE_KEY_JSON", "GOOGLE_SERVICE_KEY_FILE")


def _is_json(value: str) -> bool:
    """Check if a string looks like JSON content (not a file path)."""
    stripped = value.strip()
    return stripped.startswith("{") and stripped.endswith("}")


def bootstrap_credentials(file_path: str = None) -> bool:
    """Write the service key file from env if it does not exist yet.

    Returns True when a file was written.
    """
    file_path = file_path or get_settings().google_service_key_file

    if os.path.exists(file_path):
        log.info(f"Credential file {file_path} already exists, skipping")
        return False

    json_str = None
    source_var = None
    for var in _ENV_VARS:
        value = os.environ.get(var, "")
        if value and _is_json(value):
            json_str = value
            source_var = var
            break

    if not json_str:
        return False

    try:
        json.loads(json_str)  # Validate it's real JSON
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, "w") as f:
            f.write(json_str)
        log.info(f"Wrote {file_path} from {source_var}")
        return True
    except json.JSONDecodeError:
        log.error(f"{source_var} is not valid JSON, skipping")
    except OSError as e:
        log.error(f"Failed to write {file_path} from {source_var}: {e}")
    return False
