"""
MIRA Portal - Website Scraper

Fetches a page and reduces it to plain text for search string generation.
"""

import logging
import re
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from flask import current_app

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    'User-Agent': ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                   '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'),
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Cache-Control': 'no-cache',
    'Pragma': 'no-cache',
}

MIN_HTML_LENGTH = 100
MIN_TEXT_LENGTH = 200

JOB_URL_MARKERS = ('stepstone', 'job', 'career', 'stellenangebot')

# Structured fields pulled from job listings, first matching pattern wins
JOB_PATTERNS = [
    ('Job Title', [r'<h1[^>]*>(.*?)</h1>', r'<title[^>]*>(.*?)</title>']),
    ('Company', [r'company-name[^>]*>(.*?)</|data-company[^>]*>(.*?)</',
                 r'(?:firm|employer|company)(?:[^>]+)>(.*?)</']),
    ('Location', [r'location[^>]*>(.*?)</|address[^>]*>(.*?)</|city[^>]*>(.*?)</',
                  r'(?:standort|ort|place)(?:[^>]+)>(.*?)</']),
    ('Job Description', [r'job-description[^>]*>(.*?)</section|job-description[^>]*>(.*?)<div',
                         r'description[^>]*>(.*?)</section|description[^>]*>(.*?)<div',
                         r'aufgaben[^>]*>(.*?)</section|aufgaben[^>]*>(.*?)<div']),
    ('Requirements', [r'requirements[^>]*>(.*?)</section|requirements[^>]*>(.*?)<div',
                      r'qualifications[^>]*>(.*?)</section|qualifications[^>]*>(.*?)<div',
                      r'qualifikationen[^>]*>(.*?)</section|anforderungen[^>]*>(.*?)<div']),
]


class ScrapeError(Exception):
    """The page could not be fetched or holds too little text."""


def normalize_url(url):
    """Adds https:// when the scheme is missing."""
    url = (url or '').strip()
    if url and not re.match(r'^https?://', url, re.IGNORECASE):
        url = f'https://{url}'
    return url


def clean_text(text):
    """Strips tags and collapses whitespace of an HTML fragment."""
    text = BeautifulSoup(text, 'html.parser').get_text(' ')
    return re.sub(r'\s+', ' ', text).strip()


def html_to_text(html):
    """Visible text of a page, scripts and styles removed."""
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup(['script', 'style', 'noscript']):
        tag.decompose()
    return re.sub(r'\s+', ' ', soup.get_text(' ')).strip()


def _extract(html, patterns):
    for pattern in patterns:
        match = re.search(pattern, html, re.IGNORECASE | re.DOTALL)
        if match:
            for group in match.groups():
                if group:
                    return group
    return None


def extract_job_details(html):
    """'Label: value' block for the job fields found in html."""
    parts = []
    for label, patterns in JOB_PATTERNS:
        value = _extract(html, patterns)
        if value:
            value = clean_text(value)
            if value:
                parts.append(f'{label}: {value}')
    return '\n\n'.join(parts)


def is_job_listing(url):
    return any(marker in url.lower() for marker in JOB_URL_MARKERS)


def fetch_html(url):
    """Downloads an HTML page."""
    timeout = current_app.config.get('SCRAPER_TIMEOUT', 30)
    try:
        response = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    except requests.exceptions.Timeout:
        raise ScrapeError(f'Request timed out after {timeout} seconds')
    except requests.exceptions.RequestException as e:
        raise ScrapeError(f'Failed to fetch URL: {e}')

    if not response.ok:
        raise ScrapeError(f'Failed to fetch URL: HTTP error! Status: {response.status_code}')

    content_type = response.headers.get('content-type', '')
    if 'text/html' not in content_type:
        raise ScrapeError(f'Unsupported content type: {content_type}. Only HTML pages are supported.')

    html = response.text
    if not html or len(html) < MIN_HTML_LENGTH:
        raise ScrapeError('Retrieved HTML content is too small or empty')
    return html


def scrape_website(url):
    """
    Scrapes a website into text.

    Returns:
        {success, text, domain, url} or {success: False, error}
    """
    url = normalize_url(url)
    if not url:
        return {'success': False, 'error': 'URL parameter is required'}

    logger.info('Scraping website: %s', url)
    try:
        html = fetch_html(url)
    except ScrapeError as e:
        logger.warning('Scraping %s failed: %s', url, e)
        return {'success': False, 'error': str(e)}

    text = html_to_text(html)

    if is_job_listing(url):
        structured = extract_job_details(html)
        if len(structured) > 20:
            text = f'{structured}\n\n{text}'

    if len(text) < MIN_TEXT_LENGTH:
        return {
            'success': False,
            'error': ('Not enough text content extracted. The page might be '
                      'JavaScript-heavy or protected against scraping.'),
        }

    logger.info('Extracted %d characters from %s', len(text), url)
    return {
        'success': True,
        'text': text,
        'domain': urlparse(url).netloc,
        'url': url,
    }
