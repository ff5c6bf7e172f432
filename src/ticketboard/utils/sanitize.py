"""Error message sanitization to prevent credential leakage."""

from __future__ import annotations

import os
import re


def sanitize_error(message: str) -> str:
    """Sanitize fetch error messages before they reach the console or view."""
    if not message:
        return message

    sanitized = message
    # Credentials embedded in backend URLs
    sanitized = re.sub(r"(https?://)[^/\s:@]+:[^/\s@]+@", r"\1[REDACTED]@", sanitized)
    sanitized = re.sub(r"([?&](?:token|key|api_key|access_token)=)[^&\s'\"]+", r"\1[REDACTED]", sanitized)
    sanitized = re.sub(r"Bearer\s+\S+", "Bearer [REDACTED]", sanitized)
    sanitized = re.sub(r"Authorization:\s*\S+", "Authorization: [REDACTED]", sanitized)
    sanitized = re.sub(r"Zoho-oauthtoken\s+\S+", "Zoho-oauthtoken [REDACTED]", sanitized)

    # Redact user home paths
    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != "/":
        sanitized = sanitized.replace(home, "[USER_HOME]")

    return sanitized
