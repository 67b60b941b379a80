import argparse
import logging
import os
import sys
from typing import Any, Dict

import requests

# The archive endpoint of the deployed service
ARCHIVE_ENDPOINT_URL = os.getenv("ARCHIVE_ENDPOINT_URL", "http://127.0.0.1:8000/api/archive")
DEFAULT_TIMEOUT = 120.0


def trigger_archive(url: str = ARCHIVE_ENDPOINT_URL, timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    """
    Asks the archive service to rotate the weekly deck.

    Args:
        url: Full URL of the POST /api/archive endpoint.
        timeout: Seconds to wait for the whole archive cycle.

    Returns:
        The JSON body from the service, or a failure body describing why the
        request could not be completed.
    """
    logging.info(f"Requesting archive from {url}")

    try:
        response = requests.post(url, headers={"Content-Type": "application/json"}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logging.error(f"Could not reach the archive service: {e}")
        return {"success": False, "message": "Archive service unreachable", "error": str(e)}

    try:
        response_data = response.json()
    except ValueError:
        response_data = None

    if not isinstance(response_data, dict):
        logging.error(f"Archive service returned a body that is not a JSON object. Status: {response.status_code}")
        return {
            "success": False,
            "message": "Archive service returned an invalid response",
            "error": response.text[:500] or f"HTTP {response.status_code}",
        }

    if response.ok and response_data.get("success"):
        logging.info(f"Archive completed: {response_data.get('data')}")
    else:
        logging.error(f"Archive failed. Status: {response.status_code}. Detail: {response_data.get('error', response_data.get('message'))}")
    return response_data


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Trigger the weekly slides archive.")
    parser.add_argument("--url", default=ARCHIVE_ENDPOINT_URL, help="archive endpoint URL")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="request timeout in seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    result = trigger_archive(args.url, args.timeout)
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
