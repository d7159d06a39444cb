"""Resolve aggregator redirector links to their destination."""

import logging
from typing import Iterable
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)


def _host(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def _matches(host: str, domains: Iterable[str]) -> bool:
    return any(host == d or host.endswith("." + d) for d in domains)


class RedirectResolver:
    """Follow redirects for links on known redirector hosts.

    Resolution never fails: on a transport error, a timeout or a final page on
    a consent interstitial, the original link is returned unchanged.
    """

    def __init__(
        self,
        client: httpx.Client,
        redirect_domains: Iterable[str] = ("news.google.com",),
        consent_markers: Iterable[str] = ("consent.google.com",),
        timeout: float = 5.0,
        user_agent: str = "Mozilla/5.0",
    ) -> None:
        self.client = client
        self.redirect_domains = [d.lower() for d in redirect_domains]
        self.consent_markers = [m.lower() for m in consent_markers]
        self.timeout = timeout
        self.user_agent = user_agent

    def is_redirector(self, url: str) -> bool:
        return _matches(_host(url), self.redirect_domains)

    def resolve(self, url: str) -> str:
        """Final destination of ``url``, or ``url`` itself."""
        if not url or not self.is_redirector(url):
            return url

        try:
            response = self.client.get(
                url,
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                },
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Redirect resolution failed for %s: %s", url, e)
            return url

        final_url = str(response.url)
        if _matches(_host(final_url), self.consent_markers):
            logger.debug("Consent page reached for %s, keeping original link", url)
            return url

        return final_url
