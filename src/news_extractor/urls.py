"""URL helpers for resolving links found on listing pages."""
from urllib.parse import urlparse


def site_root(base_url: str) -> str:
    """
    Return ``scheme://netloc`` for a page url.

    Args:
        base_url: Absolute url of the fetched listing page

    Returns:
        Site root without trailing slash

    Raises:
        ValueError: If base_url has no scheme or domain

    Example:
        >>> site_root("https://unik-kediri.ac.id/list-berita")
        'https://unik-kediri.ac.id'
    """
    if not base_url or not base_url.strip():
        raise ValueError("Base URL cannot be empty")

    parsed = urlparse(base_url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Base URL must include scheme and domain: {base_url}")

    return f"{parsed.scheme}://{parsed.netloc}"


def normalize_url(href: str | None, root: str) -> str | None:
    """
    Resolve a link href against the site root.

    Rules:
    - absolute ``http``/``https`` urls pass through unchanged
    - protocol-relative ``//host/path`` gets the root's scheme
    - ``/path`` is joined directly to the root
    - any other relative path is joined to the root with a single ``/``

    Args:
        href: Raw href attribute (may be None or empty)
        root: Site root as returned by site_root()

    Returns:
        Absolute url, or None when href is missing/blank
    """
    if href is None:
        return None

    href = href.strip()
    if not href:
        return None

    if href.startswith("http://") or href.startswith("https://"):
        return href

    if href.startswith("//"):
        scheme = urlparse(root).scheme or "https"
        return f"{scheme}:{href}"

    if href.startswith("/"):
        return f"{root}{href}"

    return f"{root}/{href}"
