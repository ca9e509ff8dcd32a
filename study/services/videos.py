"""
Video recommendation service.

Extracts keywords from document text and ranks the static video catalog
against them with an additive relevance score:

    40 base
    +15 per tag equal to a keyword
    +8  per tag overlapping a keyword (substring either way), not exact
    +5  per tag overlapping a title word, at most 20
    +2  per 100,000 views, at most 15
    +10 when the video's difficulty matches the inferred complexity tier

clamped to 0..100. Videos scoring above 50 are returned best first (at
most 8); when none qualify, the three most viewed videos are returned
with a flat score of 60.
"""

import logging
import re
from collections import Counter
from typing import List, Optional, Sequence

from study.services.grading import round_half_up
from study.services.video_catalog import VIDEO_CATALOG


logger = logging.getLogger(__name__)

BASE_SCORE = 40
EXACT_MATCH_POINTS = 15
PARTIAL_MATCH_POINTS = 8
TITLE_MATCH_POINTS = 5
TITLE_MATCH_CAP = 20
POPULARITY_CAP = 15
DIFFICULTY_BONUS = 10
RELEVANCE_THRESHOLD = 50
MAX_RECOMMENDATIONS = 8
COLD_START_COUNT = 3
COLD_START_SCORE = 60
DYNAMIC_KEYWORD_LIMIT = 10

SUBJECT_KEYWORDS = [
    'motion', 'velocity', 'acceleration', 'force', 'energy', 'momentum',
    'gravity', 'waves', 'optics', 'thermodynamics', 'electricity', 'magnetism',
    'quantum', 'mechanics', 'kinematics', 'dynamics', 'oscillations', 'sound',
    'light', 'electromagnetic', 'nuclear', 'atomic', 'molecular', 'units',
    'measurements', 'vectors', 'scalars', 'work', 'power', 'friction',
    'circular motion', 'rotational', 'angular', 'torque', 'fluid', 'pressure',
    'temperature', 'heat', 'entropy', 'capacitance', 'resistance', 'current',
]

STOP_WORDS = {
    'this', 'that', 'with', 'from', 'they', 'have', 'will', 'been', 'were', 'said',
    'each', 'which', 'their', 'time', 'more', 'very', 'what', 'know', 'just', 'first',
    'into', 'over', 'think', 'also', 'after', 'back', 'other', 'many', 'than', 'then',
    'them', 'these', 'some', 'her', 'would', 'make', 'like', 'him', 'has', 'two',
    'go', 'no', 'way', 'could', 'my', 'call', 'who', 'its', 'now', 'find', 'long',
    'down', 'day', 'did', 'get', 'come', 'made', 'may', 'part',
}

ADVANCED_KEYWORDS = {'quantum', 'electromagnetic', 'thermodynamics', 'nuclear'}
INTERMEDIATE_KEYWORDS = {'motion', 'force', 'energy', 'velocity'}

_WORD_RE = re.compile(r'\b[a-z]{4,}\b', flags=re.ASCII)
_VIEWS_RE = re.compile(r'[^\d.]')


def extract_keywords(text: str) -> List[str]:
    """
    Extract subject keywords from document text.

    Curated subject keywords found anywhere in the text come first,
    followed by up to ten frequent words (four letters or more, seen at
    least twice, not stop words), most frequent first.
    """
    content = (text or "").lower()
    keywords = [keyword for keyword in SUBJECT_KEYWORDS if keyword in content]

    frequencies = Counter(
        word for word in _WORD_RE.findall(content) if word not in STOP_WORDS
    )
    # Counter keeps first-seen order, and sorted() is stable for ties
    frequent = sorted(
        (item for item in frequencies.items() if item[1] >= 2),
        key=lambda item: item[1],
        reverse=True,
    )[:DYNAMIC_KEYWORD_LIMIT]

    for word, _ in frequent:
        if word not in keywords:
            keywords.append(word)

    return keywords


def parse_view_count(views: str) -> float:
    """Turn a display count such as '2.5M' or '890K' into a number."""
    views = views or ""
    digits = _VIEWS_RE.sub('', views)
    try:
        number = float(digits)
    except ValueError:
        return 0.0

    if 'M' in views:
        return number * 1_000_000
    if 'K' in views:
        return number * 1_000
    return number


def infer_complexity(keywords: Sequence[str]) -> str:
    if any(keyword in ADVANCED_KEYWORDS for keyword in keywords):
        return 'advanced'
    if any(keyword in INTERMEDIATE_KEYWORDS for keyword in keywords):
        return 'intermediate'
    return 'beginner'


def _overlaps(a: str, b: str) -> bool:
    return a in b or b in a


def score_video(video: dict, keywords: Sequence[str], title: str, complexity: Optional[str] = None) -> dict:
    """
    Score one catalog entry.

    Returns:
        A copy of the entry with relevanceScore and matchingTags added.
    """
    lowered_keywords = [keyword.lower() for keyword in keywords]
    tags = [tag.lower() for tag in video.get("tags", [])]
    title_words = (title or "").lower().split()
    if complexity is None:
        complexity = infer_complexity(keywords)

    exact_matches = sum(1 for tag in tags if tag in lowered_keywords)
    matching_tags = [
        original for original, tag in zip(video.get("tags", []), tags)
        if any(_overlaps(tag, keyword) for keyword in lowered_keywords)
    ]
    partial_matches = len(matching_tags) - exact_matches
    title_matches = sum(
        1 for tag in tags if any(_overlaps(tag, word) for word in title_words)
    )

    score = BASE_SCORE
    score += exact_matches * EXACT_MATCH_POINTS
    score += partial_matches * PARTIAL_MATCH_POINTS
    score += min(TITLE_MATCH_CAP, title_matches * TITLE_MATCH_POINTS)
    score += min(POPULARITY_CAP, parse_view_count(video.get("views", "")) / 100_000 * 2)
    if video.get("difficulty") == complexity:
        score += DIFFICULTY_BONUS

    score = max(0, min(100, score))

    return {
        **video,
        "relevanceScore": round_half_up(score),
        "matchingTags": matching_tags,
    }


def recommend_videos(keywords: Sequence[str], title: str, catalog: Optional[Sequence[dict]] = None) -> List[dict]:
    """
    Rank catalog videos for the given keywords and source title.

    Args:
        keywords: Output of extract_keywords.
        title: Document title (or comma-joined titles).
        catalog: Entries to rank, VIDEO_CATALOG by default.

    Returns:
        At most eight videos scoring above 50, best first, or the three
        most viewed videos when none qualify.
    """
    if catalog is None:
        catalog = VIDEO_CATALOG

    complexity = infer_complexity(keywords)
    scored = [score_video(video, keywords, title, complexity) for video in catalog]

    relevant = sorted(
        (video for video in scored if video["relevanceScore"] > RELEVANCE_THRESHOLD),
        key=lambda video: video["relevanceScore"],
        reverse=True,
    )[:MAX_RECOMMENDATIONS]

    if relevant:
        logger.info(f"Recommending {len(relevant)} videos (complexity={complexity})")
        return relevant

    logger.info("No video cleared the relevance threshold, using most viewed videos")
    most_viewed = sorted(
        catalog,
        key=lambda video: parse_view_count(video.get("views", "")),
        reverse=True,
    )[:COLD_START_COUNT]
    return [
        {**video, "relevanceScore": COLD_START_SCORE, "matchingTags": []}
        for video in most_viewed
    ]


def recommend_for_text(text: str, title: str, catalog: Optional[Sequence[dict]] = None) -> dict:
    """Extract keywords from text and rank the catalog against them."""
    keywords = extract_keywords(text)
    return {
        "keywords": keywords,
        "videos": recommend_videos(keywords, title, catalog),
    }
