# dailyreport/google_auth.py
import os
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .logger import logger

SCOPES = [
    "https://www.googleapis.com/auth/gmail.modify",   # search + mark read
    "https://www.googleapis.com/auth/drive",          # lookup, thumbnails, temp uploads
    "https://www.googleapis.com/auth/documents",      # read lesson plan, rewrite report
]


class GoogleAuthError(Exception):
    """Raised when Google credentials cannot be loaded/refreshed."""


def _token_paths():
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    token_path = os.getenv("GOOGLE_TOKEN_JSON", os.path.join(root, "token.json"))
    client_secret_path = os.getenv("GOOGLE_CLIENT_SECRET_JSON", os.path.join(root, "client_secret.json"))
    return token_path, client_secret_path


def load_credentials(interactive: bool = True) -> Credentials:
    """
    Load the authorized-user token, refreshing it when expired.
    With no usable token and interactive=True, run the local consent flow
    once and save the result next to the project (local dev only).
    """
    token_path, client_secret_path = _token_paths()
    creds: Optional[Credentials] = None

    if os.path.exists(token_path):
        creds = Credentials.from_authorized_user_file(token_path, SCOPES)

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except Exception as e:
            raise GoogleAuthError(f"Google token refresh failed: {e}") from e
        with open(token_path, "w") as f:
            f.write(creds.to_json())

    if creds and creds.valid:
        return creds

    if not interactive:
        raise GoogleAuthError(f"No valid Google token at {token_path}")

    logger.info("[AUTH] No valid token; starting local consent flow")
    flow = InstalledAppFlow.from_client_secrets_file(client_secret_path, SCOPES)
    creds = flow.run_local_server(port=0)
    with open(token_path, "w") as f:
        f.write(creds.to_json())
    return creds


def gmail_service(creds: Credentials):
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def drive_service(creds: Credentials):
    return build("drive", "v3", credentials=creds, cache_discovery=False)


def docs_service(creds: Credentials):
    return build("docs", "v1", credentials=creds, cache_discovery=False)
