import re
from typing import List

from ats_scanner.helpers.ats_profiles import STANDARD_SECTIONS
from ats_scanner.models.analysis import FormatIssue, FormatQualityReport, ParsingAnalysis

MIN_WORDS = 150
MAX_WORDS = 1200
MISSING_SECTION_PENALTY = 10.0
NONSTANDARD_HEADING_PENALTY = 5.0
MAX_NONSTANDARD_HEADING_PENALTY = 15.0

_BULLET = re.compile(r"^\s*([•\-*◦▪➢►✓])\s+", re.MULTILINE)
_EXCESSIVE_WHITESPACE = re.compile(r"\n[ \t]*\n[ \t]*\n")
_ALL_CAPS_LINE = re.compile(r"^[A-Z][A-Z &/]{2,}$")


def _looks_like_heading(line: str) -> bool:
    stripped = line.strip().rstrip(":")
    if not stripped or len(stripped.split()) > 5:
        return False
    return bool(_ALL_CAPS_LINE.match(stripped)) or line.strip().endswith(":")


def assess_format_quality(resume_text: str, parsing: ParsingAnalysis) -> FormatQualityReport:
    """
    Local structural quality heuristic, 0-100.

    Penalizes missing standard sections, very short or very long resumes,
    heading-like lines no parser would recognize, and layout noise
    (blank-line runs, mixed bullet styles, encoding artifacts).
    """
    issues: List[FormatIssue] = []
    found = set(parsing.section_names)
    recognized_lines = {s.start_line for s in parsing.sections}

    for section in STANDARD_SECTIONS:
        if section not in found:
            issues.append(FormatIssue(
                issue_id=f"missing_{section}",
                description=f"No {section} section heading found",
                penalty=MISSING_SECTION_PENALTY,
                recommendation=f"Add a '{section.title()}' heading.",
            ))

    word_count = len(resume_text.split())
    if word_count < MIN_WORDS:
        issues.append(FormatIssue(
            issue_id="too_short",
            description=f"Resume has only {word_count} words",
            penalty=15.0,
            recommendation="Expand on responsibilities and measurable results; aim for 400-800 words.",
        ))
    elif word_count > MAX_WORDS:
        issues.append(FormatIssue(
            issue_id="too_long",
            description=f"Resume has {word_count} words",
            penalty=10.0,
            recommendation="Trim older or less relevant roles; aim for two pages at most.",
        ))

    unrecognized = [
        line.strip() for number, line in enumerate(resume_text.splitlines(), start=1)
        if number not in recognized_lines and _looks_like_heading(line)
    ]
    if unrecognized:
        issues.append(FormatIssue(
            issue_id="nonstandard_headings",
            description=f"Headings not recognized by common parsers: {', '.join(unrecognized[:5])}",
            penalty=min(NONSTANDARD_HEADING_PENALTY * len(unrecognized), MAX_NONSTANDARD_HEADING_PENALTY),
            recommendation="Rename sections to conventional headings (Experience, Education, Skills, Summary).",
        ))

    if _EXCESSIVE_WHITESPACE.search(resume_text):
        issues.append(FormatIssue(
            issue_id="excessive_whitespace",
            description="Runs of blank lines detected",
            penalty=5.0,
            recommendation="Use a single blank line between sections.",
        ))

    if len(set(_BULLET.findall(resume_text))) > 2:
        issues.append(FormatIssue(
            issue_id="inconsistent_bullets",
            description="More than two bullet styles used",
            penalty=5.0,
            recommendation="Pick one bullet style and use it throughout.",
        ))

    if "�" in resume_text:
        issues.append(FormatIssue(
            issue_id="encoding_artifacts",
            description="Replacement characters found; the text was decoded with the wrong encoding",
            penalty=10.0,
            recommendation="Re-export the resume as UTF-8.",
        ))

    score = max(0.0, 100.0 - sum(issue.penalty for issue in issues))
    return FormatQualityReport(
        score=score,
        word_count=word_count,
        sections_found=sorted(found),
        issues=issues,
    )
