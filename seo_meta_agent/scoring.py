from __future__ import annotations

from dataclasses import dataclass, field

from .meta_extractor import MetaTags
from .models import MetaTagReport, SEOIssue

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160


@dataclass
class ScoreReport:
    score: int = 100
    issues: list[SEOIssue] = field(default_factory=list)
    tags: list[MetaTagReport] = field(default_factory=list)

    def issue(self, type_: str, message: str, penalty: int = 0) -> None:
        self.score -= penalty
        self.issues.append(SEOIssue(type=type_, message=message))

    def tag(self, name: str, content: str | None, status: str, recommendation: str | None = None) -> None:
        self.tags.append(
            MetaTagReport(name=name, content=content or "", status=status, recommendation=recommendation)
        )


def _clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


def _score_title(meta: MetaTags, r: ScoreReport) -> None:
    if not meta.title:
        r.issue("error", "Missing title tag", 25)
        r.tag(
            "title", "", "missing",
            "Add a unique, descriptive title tag (30-60 characters) to help search engines understand your page",
        )
        return
    n = len(meta.title)
    if n < TITLE_MIN:
        r.issue("warning", f"Title too short ({n} chars)", 15)
        r.tag("title", meta.title, "warning", "Title should be 30-60 characters long for optimal display in search results")
    elif n > TITLE_MAX:
        r.issue("warning", f"Title too long ({n} chars)", 10)
        r.tag("title", meta.title, "warning", "Title should be 30-60 characters long to avoid truncation in search results")
    else:
        r.issue("success", "Title tag length is optimal")
        r.tag("title", meta.title, "good")


def _score_description(meta: MetaTags, r: ScoreReport) -> None:
    if not meta.description:
        r.issue("error", "Missing meta description", 20)
        r.tag(
            "description", "", "missing",
            "Add a compelling meta description (120-160 characters) to improve click-through rates",
        )
        return
    n = len(meta.description)
    if n < DESCRIPTION_MIN:
        r.issue("warning", f"Meta description too short ({n} chars)", 10)
        r.tag("description", meta.description, "warning", "Meta description should be 120-160 characters for optimal SERP display")
    elif n > DESCRIPTION_MAX:
        r.issue("warning", f"Meta description too long ({n} chars)", 8)
        r.tag("description", meta.description, "warning", "Meta description should be 120-160 characters to avoid truncation")
    else:
        r.issue("success", "Meta description length is optimal")
        r.tag("description", meta.description, "good")


def _score_open_graph(meta: MetaTags, r: ScoreReport) -> None:
    if meta.og_title and meta.og_description:
        r.issue("success", "Open Graph tags configured")
        r.tag("og:title", meta.og_title, "good")
        r.tag("og:description", meta.og_description, "good")
    else:
        r.issue("warning", "Incomplete Open Graph tags", 15)
        if not meta.og_title:
            r.tag("og:title", "", "missing", "Add Open Graph title for better social media sharing")
        if not meta.og_description:
            r.tag("og:description", "", "missing", "Add Open Graph description for better social media sharing")

    if meta.og_image:
        r.tag("og:image", meta.og_image, "good")
    else:
        r.issue("warning", "Missing Open Graph image", 10)
        r.tag(
            "og:image", "", "missing",
            "Add an Open Graph image (1200x630px recommended) for better social media sharing",
        )


def score_meta_tags(meta: MetaTags) -> ScoreReport:
    """Score a page's head tags out of 100 and explain every deduction."""
    r = ScoreReport()
    _score_title(meta, r)
    _score_description(meta, r)
    _score_open_graph(meta, r)

    if meta.canonical:
        r.issue("success", "Canonical URL specified")
        r.tag("canonical", meta.canonical, "good")
    else:
        r.issue("warning", "Missing canonical URL", 8)
        r.tag("canonical", "", "missing", "Add canonical URL to avoid duplicate content issues")

    if meta.viewport:
        r.tag("viewport", meta.viewport, "good")
    else:
        r.issue("warning", "Missing viewport meta tag", 5)
        r.tag("viewport", "", "missing", "Add viewport meta tag for mobile responsiveness")

    # Informational only, no deduction.
    if meta.robots:
        r.tag("robots", meta.robots, "good")
    else:
        r.tag("robots", "", "missing", "Consider adding robots meta tag to control search engine crawling")

    r.score = _clamp_score(r.score)
    return r
