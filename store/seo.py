"""
SEO completeness scores.

Every score is a weighted checklist summed and capped at 100. The admin
console shows them next to each catalogue entry, blog post and static page.
"""
import re

MAX_SCORE = 100


def _length_points(text, low, high, full, partial, partial_min=1):
    length = len((text or '').strip())
    if low <= length <= high:
        return full
    if length >= partial_min:
        return partial
    return 0


def _title_points(title):
    return _length_points(title, 30, 60, 20, 10)


def _description_points(description):
    return _length_points(description, 120, 160, 20, 10)


def score_category(category):
    score = _title_points(category.seo_title)
    score += _description_points(category.seo_description)
    if category.seo_keywords.strip():
        score += 15
    if category.og_title.strip():
        score += 15
    if category.og_description.strip():
        score += 15
    if category.image_url or category.og_image:
        score += 15
    return min(score, MAX_SCORE)


def score_product(product):
    score = _title_points(product.seo_title)
    score += _description_points(product.seo_description)
    if product.keyword_list:
        score += 15
    if product.og_title.strip():
        score += 15
    if product.pk:
        images = list(product.images.all())
        if images and all(image.alt_text.strip() for image in images):
            score += 15
    if len(strip_html(product.description)) >= 100:
        score += 15
    return min(score, MAX_SCORE)


def score_prebuilt_pc(pc):
    score = _title_points(pc.seo_title)
    score += _description_points(pc.seo_description)
    if pc.keyword_list:
        score += 15
    if pc.og_title.strip():
        score += 15
    if pc.primary_image and pc.primary_image_alt.strip():
        score += 15
    if len(strip_html(pc.description)) >= 100:
        score += 15
    return min(score, MAX_SCORE)


def score_blog(blog):
    score = _title_points(blog.seo_title or blog.title)
    score += _length_points(blog.seo_description or blog.excerpt, 120, 160, 20, 10, partial_min=50)

    keywords = blog.keyword_list
    if len(keywords) >= 3:
        score += 15
    elif keywords:
        score += 7

    if blog.featured_image:
        score += 15 if blog.featured_image_alt.strip() else 7

    if len((blog.excerpt or '').strip()) >= 50:
        score += 10
    if blog.category_id:
        score += 10

    tags = blog.tag_names
    if len(tags) >= 2:
        score += 10
    elif len(tags) == 1:
        score += 5
    return min(score, MAX_SCORE)


PAGE_CHECKS = (
    # (weight, predicate, issue)
    (25, lambda p: bool(p.seo_title.strip()), "Missing SEO title"),
    (25, lambda p: bool(p.seo_description.strip()), "Missing meta description"),
    (10, lambda p: bool(p.seo_keywords.strip()), "Missing keywords"),
    (15, lambda p: bool(p.og_title.strip() and p.og_image), "Missing Open Graph title or image"),
    (10, lambda p: bool(p.twitter_title.strip()), "Missing Twitter card"),
    (10, lambda p: bool(p.json_ld), "Missing structured data"),
    (5, lambda p: bool(p.canonical_url), "Missing canonical URL"),
)


def analyze_page(page):
    """Return ``(score, issues)`` for a static page. No-index pages are not graded."""
    if not page.robots_index:
        return MAX_SCORE, []
    score = 0
    issues = []
    for weight, passes, issue in PAGE_CHECKS:
        if passes(page):
            score += weight
        else:
            issues.append(issue)
    return min(score, MAX_SCORE), issues


def seo_issues(entity):
    """Missing-field flags used by the SEO analytics report."""
    return {
        'missing_title': not (entity.seo_title or '').strip(),
        'missing_description': not (entity.seo_description or '').strip(),
        'missing_keywords': not (entity.seo_keywords or '').strip(),
        'missing_og_image': not entity.og_image,
        'missing_schema': not entity.json_ld,
        'missing_canonical': not entity.canonical_url,
        'missing_twitter': not (entity.twitter_title or '').strip(),
    }


_TAG_RE = re.compile(r'<[^>]+>')


def strip_html(html):
    return _TAG_RE.sub(' ', html or '').strip()
