from __future__ import annotations

import logging

import requests
from bs4 import BeautifulSoup

from justapply.types import JobDetails

logger = logging.getLogger(__name__)


USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

JOB_ROLE_SELECTORS = ("h1",)
COMPANY_SELECTORS = (".company-name", "[data-company]")
DESCRIPTION_SELECTORS = (".job-description", "[data-job-description]")


def _first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = element.get_text()
        if text:
            return text.strip()
    return ""


def scrape_job_details(document: str | bytes | BeautifulSoup) -> JobDetails:
    """Best-effort job fields from an HTML snapshot; unmatched fields are empty."""
    soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document or "", "html.parser")
    return JobDetails(
        company=_first_text(soup, COMPANY_SELECTORS),
        job_role=_first_text(soup, JOB_ROLE_SELECTORS),
        job_description=_first_text(soup, DESCRIPTION_SELECTORS),
    )


def fetch_page_html(url: str, timeout_sec: int = 30) -> str:
    try:
        response = requests.get(url, timeout=timeout_sec, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch job URL %s: %s", url, exc)
        return ""
    return response.text
