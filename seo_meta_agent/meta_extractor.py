from __future__ import annotations

from dataclasses import asdict, dataclass

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class MetaTags:
    title: str | None = None
    description: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None
    canonical: str | None = None
    robots: str | None = None
    viewport: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return asdict(self)


def _clean(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        value = " ".join(value)
    text = str(value).strip()
    return text or None


def extract_meta_tags(html: str) -> MetaTags:
    """Pull the SEO-relevant head tags out of an HTML document.

    Never raises for bad markup; a tag that is missing or empty maps to None.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    def meta_by(attr: str, key: str) -> str | None:
        tag = soup.find("meta", attrs={attr: key})
        return _clean(tag.get("content")) if tag else None

    def link_rel(rel: str) -> str | None:
        for tag in soup.find_all("link", href=True):
            rels = tag.get("rel") or []
            if isinstance(rels, str):
                rels = rels.split()
            if rel in (r.lower() for r in rels):
                return _clean(tag.get("href"))
        return None

    title_tag = soup.find("title")
    title = _clean(title_tag.get_text()) if title_tag else None

    return MetaTags(
        title=title,
        description=meta_by("name", "description"),
        og_title=meta_by("property", "og:title"),
        og_description=meta_by("property", "og:description"),
        og_image=meta_by("property", "og:image"),
        twitter_title=meta_by("name", "twitter:title"),
        twitter_description=meta_by("name", "twitter:description"),
        twitter_image=meta_by("name", "twitter:image"),
        canonical=link_rel("canonical"),
        robots=meta_by("name", "robots"),
        viewport=meta_by("name", "viewport"),
    )
