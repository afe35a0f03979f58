"""
ATS system profiles and the section heading lexicon.

Penalties are fractions of a system's score (1.0 = perfect parse).
"""
import re
from typing import Dict, Tuple

from ats_scanner.models.reference import ATSSystemProfile, DetectionPattern, StructuralRules

SECTION_HEADINGS: Dict[str, Tuple[str, ...]] = {
    "contact": ("contact", "contact information", "contact info", "contact details"),
    "summary": ("summary", "professional summary", "profile", "professional profile", "objective",
                "career objective", "about me", "executive summary", "career summary"),
    "experience": ("experience", "work experience", "professional experience", "employment history",
                   "work history", "employment", "career history", "relevant experience", "experience summary"),
    "education": ("education", "academic background", "education and training", "qualifications",
                  "academic qualifications", "education & training"),
    "skills": ("skills", "technical skills", "core competencies", "competencies", "key skills",
               "technologies", "skills & abilities", "skills and abilities", "areas of expertise"),
    "certifications": ("certifications", "certificates", "licenses", "licenses and certifications",
                       "licenses & certifications", "credentials"),
    "projects": ("projects", "key projects", "personal projects", "selected projects"),
    "awards": ("awards", "honors", "achievements", "honors and awards", "honors & awards", "accomplishments"),
    "publications": ("publications", "research", "papers"),
    "volunteer": ("volunteer experience", "volunteering", "community involvement"),
}

STANDARD_SECTIONS: Tuple[str, ...] = ("experience", "education", "skills")

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s][0-9]{3}[-.\s][0-9]{4}(?!\d)")
LOOSE_PHONE_PATTERN = re.compile(r"(?<!\d)\+?\d(?:[\d\s.-]{8,16})\d(?!\d)")
LINKEDIN_PATTERN = re.compile(r"linkedin\.com/in/[a-zA-Z0-9_-]+", re.IGNORECASE)

EMAIL_CONFIDENCE = 0.95
PHONE_CONFIDENCE = 0.85
LOOSE_PHONE_CONFIDENCE = 0.5


def _pattern(pattern_id, category, pattern, penalty, description, recommendation, **kwargs):
    return DetectionPattern(
        pattern_id=pattern_id,
        category=category,
        pattern=pattern,
        penalty=penalty,
        description=description,
        recommendation=recommendation,
        **kwargs
    )


TABLES = r"<table|<tr>|<td|\|\s*[^|\n]+\s*\|\s*[^|\n]+\s*\|"
IMAGES = r"<img|\.(?:jpe?g|png|gif)\b"
TEXT_BOXES = r"text-box|<textbox|w:txbxcontent|position:\s*absolute"
COLUMNS = r"columns:\s*\d+|float:\s*(?:left|right)|column-count"
DECORATIVE_CHARACTERS = r"[★♦♣♠♥✓✗➢➤►▶◆❖]"
ENCODING_ARTIFACTS = r"�|â€"
DATES = r"\b(?:19|20)\d{2}\b"

_TABLE_ADVICE = "Replace tables with plain text lines; many parsers read table cells out of order."
_IMAGE_ADVICE = "Move any text out of images and graphics; ATS parsers cannot read it."

GREENHOUSE = ATSSystemProfile(
    system_id="greenhouse",
    display_name="Greenhouse",
    structural_rules=StructuralRules(
        required_sections=STANDARD_SECTIONS,
        missing_section_penalty=0.05,
        max_section_penalty=0.15,
    ),
    detection_patterns=(
        _pattern("greenhouse_tables", "tables", TABLES, 0.25,
                 "Table markup detected; Greenhouse flattens tables unpredictably", _TABLE_ADVICE),
        _pattern("greenhouse_special_characters", "special_characters", DECORATIVE_CHARACTERS, 0.05,
                 "Decorative symbols detected", "Use plain round bullets or hyphens instead of decorative symbols."),
        _pattern("greenhouse_encoding", "encoding", ENCODING_ARTIFACTS, 0.10,
                 "Character encoding artifacts detected", "Re-export the resume as UTF-8 text or a clean PDF."),
    ),
)

LEVER = ATSSystemProfile(
    system_id="lever",
    display_name="Lever",
    structural_rules=StructuralRules(
        required_sections=("experience", "skills"),
        missing_section_penalty=0.05,
        max_section_penalty=0.10,
    ),
    detection_patterns=(
        _pattern("lever_text_boxes", "text_boxes", TEXT_BOXES, 0.20,
                 "Text boxes or absolutely positioned content detected",
                 "Keep all content in the main document flow; avoid text boxes."),
        _pattern("lever_complex_formatting", "complex_formatting", COLUMNS, 0.15,
                 "Multi-column or floating layout detected", "Use a single-column layout."),
    ),
)

WORKDAY = ATSSystemProfile(
    system_id="workday",
    display_name="Workday",
    structural_rules=StructuralRules(
        required_sections=STANDARD_SECTIONS,
        missing_section_penalty=0.05,
        max_section_penalty=0.15,
        require_phone=True,
    ),
    detection_patterns=(
        _pattern("workday_image_text", "images", IMAGES, 0.30,
                 "Images detected; Workday cannot extract text from them", _IMAGE_ADVICE),
        _pattern("workday_font_issues", "fonts", r"comic sans|papyrus|brush script", 0.10,
                 "Decorative font detected", "Use a standard font such as Arial, Calibri or Times New Roman."),
        _pattern("workday_encoding", "encoding", ENCODING_ARTIFACTS, 0.10,
                 "Character encoding artifacts detected", "Re-export the resume as UTF-8 text or a clean PDF."),
    ),
)

TALEO = ATSSystemProfile(
    system_id="taleo",
    display_name="Oracle Taleo",
    structural_rules=StructuralRules(
        required_sections=("experience", "education"),
        missing_section_penalty=0.08,
        max_section_penalty=0.16,
        require_phone=True,
    ),
    detection_patterns=(
        _pattern("taleo_tables", "tables", TABLES, 0.20,
                 "Table markup detected; Taleo drops table content", _TABLE_ADVICE),
        _pattern("taleo_missing_dates", "dates", DATES, 0.10,
                 "No employment dates found", "Add start and end dates (e.g. 'Jan 2020 - Present') to each position.",
                 trigger_when_absent=True),
        _pattern("taleo_special_bullets", "special_characters", DECORATIVE_CHARACTERS, 0.05,
                 "Non-standard bullet characters detected", "Use plain round bullets or hyphens instead of decorative symbols."),
    ),
)

ICIMS = ATSSystemProfile(
    system_id="icims",
    display_name="iCIMS",
    structural_rules=StructuralRules(
        required_sections=(),
        min_recognized_sections=3,
        unrecognized_layout_penalty=0.15,
    ),
    detection_patterns=(
        _pattern("icims_tables", "tables", TABLES, 0.15,
                 "Table markup detected", _TABLE_ADVICE),
        _pattern("icims_headers_footers", "headers_footers", r"page\s+\d+\s+of\s+\d+", 0.05,
                 "Page header/footer text detected", "Keep contact details in the body, not in headers or footers."),
    ),
)

ATS_PROFILES: Tuple[ATSSystemProfile, ...] = (GREENHOUSE, LEVER, WORKDAY, TALEO, ICIMS)
