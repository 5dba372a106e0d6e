import logging
from typing import List, Dict, Optional

logger = logging.getLogger(__name__)


class GitHubTokenRotator:
    """Manages rotation of GitHub tokens to maximize rate limits."""

    def __init__(self, tokens: Optional[List[str]] = None):
        self.tokens = [t for t in (tokens or []) if t]
        if not self.tokens:
            logger.warning("No GitHub token configured, using unauthenticated requests (60/hour)")
        self.current_index = 0
        self.token_stats = {token: {"requests": 0, "errors": 0} for token in self.tokens}

    def get_next_token(self) -> Optional[str]:
        """Get the next token in rotation."""
        if not self.tokens:
            return None
        token = self.tokens[self.current_index]
        self.current_index = (self.current_index + 1) % len(self.tokens)
        self.token_stats[token]["requests"] += 1
        return token

    def get_headers(self) -> Dict[str, str]:
        """Get headers with rotated token."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "ReleaseStats/1.0",
        }
        token = self.get_next_token()
        if token:
            headers["Authorization"] = f"token {token}"
        return headers

    def mark_error(self, headers: Dict[str, str]):
        """Mark the token used for a request as having encountered an error."""
        token = headers.get("Authorization", "").replace("token ", "", 1)
        if token in self.token_stats:
            self.token_stats[token]["errors"] += 1
