from seo_meta_agent.meta_extractor import MetaTags
from seo_meta_agent.scoring import score_meta_tags

GOOD_TITLE = "A" * 45
GOOD_DESCRIPTION = "D" * 140


def _complete(**overrides):
    fields = dict(
        title=GOOD_TITLE,
        description=GOOD_DESCRIPTION,
        og_title="OG",
        og_description="OG desc",
        og_image="https://example.com/og.png",
        canonical="https://example.com/",
        viewport="width=device-width",
        robots="index",
    )
    fields.update(overrides)
    return MetaTags(**fields)


def _tag(report, name):
    return next(t for t in report.tags if t.name == name)


def test_complete_page_scores_100():
    report = score_meta_tags(_complete())
    assert report.score == 100
    assert all(i.type == "success" for i in report.issues)
    assert all(t.status == "good" for t in report.tags)


def test_missing_description_and_canonical():
    report = score_meta_tags(_complete(description=None, canonical=None))

    assert report.score == 100 - 20 - 8
    errors = [i for i in report.issues if i.type == "error"]
    warnings = [i for i in report.issues if i.type == "warning"]
    assert [e.message for e in errors] == ["Missing meta description"]
    assert "Missing canonical URL" in [w.message for w in warnings]
    assert _tag(report, "title").status == "good"
    assert _tag(report, "description").status == "missing"
    assert _tag(report, "canonical").recommendation


def test_title_length_bands():
    short = score_meta_tags(_complete(title="Short"))
    assert short.score == 85
    assert _tag(short, "title").status == "warning"
    assert short.issues[0].message == "Title too short (5 chars)"

    long = score_meta_tags(_complete(title="L" * 61))
    assert long.score == 90
    assert long.issues[0].message == "Title too long (61 chars)"

    assert score_meta_tags(_complete(title="T" * 30)).score == 100
    assert score_meta_tags(_complete(title="T" * 60)).score == 100


def test_description_length_bands():
    assert score_meta_tags(_complete(description="d" * 119)).score == 90
    assert score_meta_tags(_complete(description="d" * 161)).score == 92
    assert score_meta_tags(_complete(description="d" * 120)).score == 100
    assert score_meta_tags(_complete(description="d" * 160)).score == 100


def test_incomplete_open_graph():
    report = score_meta_tags(_complete(og_description=None))
    assert report.score == 85
    assert [t.name for t in report.tags if t.name.startswith("og:")] == ["og:description", "og:image"]
    assert _tag(report, "og:description").status == "missing"
    assert "Incomplete Open Graph tags" in [i.message for i in report.issues]


def test_missing_og_image_and_viewport():
    report = score_meta_tags(_complete(og_image=None, viewport=None))
    assert report.score == 100 - 10 - 5


def test_missing_robots_is_informational():
    report = score_meta_tags(_complete(robots=None))
    assert report.score == 100
    assert _tag(report, "robots").status == "missing"


def test_empty_page_floors_at_zero_or_above():
    report = score_meta_tags(MetaTags())
    assert report.score == 100 - 25 - 20 - 15 - 10 - 8 - 5
    assert 0 <= report.score <= 100
    assert {t.name for t in report.tags} == {
        "title", "description", "og:title", "og:description", "og:image", "canonical", "viewport", "robots",
    }


def test_scoring_is_deterministic():
    meta = _complete(description=None)
    a, b = score_meta_tags(meta), score_meta_tags(meta)
    assert a.score == b.score
    assert a.issues == b.issues
    assert a.tags == b.tags
