import json
import os
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from models import ConfigError

# --- Configuration ---
REQUIRED_ENV_VARS = ["CURRENT_SLIDES_ID", "ARCHIVE_SLIDES_ID", "GOOGLE_SERVICE_ACCOUNT_KEY"]
DEFAULT_REPO_URL = "https://github.com/anupsathya/ax-slides"


class ServiceAccountInfo(BaseModel):
    """Standard fields of a Google service-account key file."""
    model_config = ConfigDict(extra="allow")

    type: str
    project_id: str
    private_key_id: str
    private_key: str
    client_email: str
    client_id: str
    token_uri: str
    auth_uri: Optional[str] = None
    auth_provider_x509_cert_url: Optional[str] = None
    client_x509_cert_url: Optional[str] = None


class ArchiveConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_slides_id: str
    archive_slides_id: str
    service_account: ServiceAccountInfo


class PageLinks(BaseModel):
    add_slides_url: Optional[str] = None
    present_url: Optional[str] = None
    repo_url: str = DEFAULT_REPO_URL


def _parse_service_account(raw_key: str) -> ServiceAccountInfo:
    try:
        data = json.loads(raw_key)
    except json.JSONDecodeError as e:
        raise ConfigError(f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object")

    try:
        return ServiceAccountInfo(**data)
    except ValidationError as e:
        invalid = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ConfigError(
            f"GOOGLE_SERVICE_ACCOUNT_KEY has missing or invalid service account fields: {', '.join(invalid)}"
        ) from e


def load_config(environ: Optional[Mapping[str, str]] = None) -> ArchiveConfig:
    """Builds the archive configuration from environment variables.

    Raises ConfigError if a required variable is missing or the
    service-account key cannot be parsed.
    """
    env = os.environ if environ is None else environ

    missing: List[str] = [name for name in REQUIRED_ENV_VARS if not env.get(name, "").strip()]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    return ArchiveConfig(
        current_slides_id=env["CURRENT_SLIDES_ID"].strip(),
        archive_slides_id=env["ARCHIVE_SLIDES_ID"].strip(),
        service_account=_parse_service_account(env["GOOGLE_SERVICE_ACCOUNT_KEY"]),
    )


def load_page_links(environ: Optional[Mapping[str, str]] = None) -> PageLinks:
    env = os.environ if environ is None else environ
    links: Dict[str, Any] = {}

    current_id = env.get("CURRENT_SLIDES_ID")
    if current_id:
        links["add_slides_url"] = f"https://docs.google.com/presentation/d/{current_id}/edit"
        links["present_url"] = f"https://docs.google.com/presentation/d/{current_id}/present"
    if env.get("PRESENT_URL"):
        links["present_url"] = env["PRESENT_URL"]
    if env.get("REPO_URL"):
        links["repo_url"] = env["REPO_URL"]

    return PageLinks(**links)
