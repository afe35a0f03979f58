"""
ATS Behavior Simulator

Replays a resume through every registered ATS system profile. Each system is
scored independently: structural parsing first (contact details, section
headings), then the profile's detection patterns. The overall score is the
plain mean of the per-system scores.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ats_scanner.helpers.ats_profiles import (
    EMAIL_CONFIDENCE, EMAIL_PATTERN, LINKEDIN_PATTERN, LOOSE_PHONE_CONFIDENCE, LOOSE_PHONE_PATTERN,
    PHONE_CONFIDENCE, PHONE_PATTERN, SECTION_HEADINGS
)
from ats_scanner.helpers.text import TokenizedText, normalize_term
from ats_scanner.models.analysis import (
    ATSSimulationResult, ATSSystemSimulationResult, ContactInfo, KeywordExtraction, OptimizationRecommendation,
    ParsingAnalysis, SectionBoundary, TriggeredRule
)
from ats_scanner.models.reference import ATSSystemProfile, RuleSeverity
from ats_scanner.services.reference_data import ReferenceData
from ats_scanner.utils.exceptions import ConfigurationError, DocumentParsingError, raise_logged
from ats_scanner.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

SEVERITY_RANK = {
    RuleSeverity.LOW: 0,
    RuleSeverity.MEDIUM: 1,
    RuleSeverity.HIGH: 2,
    RuleSeverity.CRITICAL: 3,
}
MAX_HEADING_LENGTH = 60
MIN_PHONE_DIGITS = 10


class ATSSimulator:
    """Emulates how several applicant tracking systems parse the same resume"""

    def __init__(self, reference: ReferenceData, headings: Dict[str, Tuple[str, ...]] = None):
        self.profiles: Tuple[ATSSystemProfile, ...] = reference.ats_profiles
        self._patterns = {
            profile.system_id: tuple((p, p.compiled()) for p in profile.detection_patterns)
            for profile in self.profiles
        }
        self._headings = {
            normalize_term(heading): name
            for name, variants in (headings or SECTION_HEADINGS).items()
            for heading in variants
        }

    @log_function_call
    def simulate(self, resume_text: str, target_keywords: Sequence[str] = ()) -> ATSSimulationResult:
        if not resume_text or not resume_text.strip():
            raise_logged(DocumentParsingError("Resume text is empty; nothing to parse", document_kind="resume"),
                         logger, "ats_simulation")
        if not self.profiles:
            raise_logged(ConfigurationError("No ATS system profiles are registered", config_key="ats_profiles"),
                         logger, "ats_simulation")

        parsing = self.parse_structure(resume_text)
        system_results = [self._simulate_system(profile, resume_text, parsing) for profile in self.profiles]
        overall = sum(r.score for r in system_results) / len(system_results)

        logger.info(
            f"ATS simulation over {len(system_results)} systems: overall={overall:.3f}, "
            f"sections={parsing.section_names}"
        )
        return ATSSimulationResult(
            system_results=system_results,
            overall_ats_score=overall,
            parsing_analysis=parsing,
            keyword_extraction=self.check_keywords(resume_text, target_keywords),
            recommendations=self._recommendations(system_results),
        )

    # ------------------------------------------------------------ parsing

    def parse_structure(self, resume_text: str) -> ParsingAnalysis:
        return ParsingAnalysis(contact=self._contact_info(resume_text), sections=self._sections(resume_text))

    @staticmethod
    def _contact_info(text: str) -> ContactInfo:
        email_confidence = EMAIL_CONFIDENCE if EMAIL_PATTERN.search(text) else 0.0

        phone_confidence = 0.0
        if PHONE_PATTERN.search(text):
            phone_confidence = PHONE_CONFIDENCE
        elif any(sum(ch.isdigit() for ch in m.group(0)) >= MIN_PHONE_DIGITS for m in LOOSE_PHONE_PATTERN.finditer(text)):
            phone_confidence = LOOSE_PHONE_CONFIDENCE

        return ContactInfo(
            email_detected=email_confidence > 0,
            email_confidence=email_confidence,
            phone_detected=phone_confidence > 0,
            phone_confidence=phone_confidence,
            linkedin_detected=LINKEDIN_PATTERN.search(text) is not None,
            extraction_confidence=(email_confidence + phone_confidence) / 2,
        )

    def _heading_name(self, line: str) -> Optional[str]:
        stripped = line.strip()
        if not stripped or len(stripped) > MAX_HEADING_LENGTH:
            return None
        name = self._headings.get(normalize_term(stripped))
        if name is None and ":" in stripped:
            name = self._headings.get(normalize_term(stripped.split(":", 1)[0]))
        return name

    def _sections(self, text: str) -> List[SectionBoundary]:
        lines = text.splitlines()
        starts = []
        for number, line in enumerate(lines, start=1):
            name = self._heading_name(line)
            if name is not None:
                starts.append((name, line.strip(), number))

        sections = []
        for index, (name, heading, start) in enumerate(starts):
            end = starts[index + 1][2] - 1 if index + 1 < len(starts) else len(lines)
            sections.append(SectionBoundary(name=name, heading=heading, start_line=start, end_line=end))
        return sections

    # ------------------------------------------------------------ per system

    def _simulate_system(self, profile: ATSSystemProfile, text: str, parsing: ParsingAnalysis) -> ATSSystemSimulationResult:
        triggered = self._structural_rules(profile, parsing)

        for pattern, compiled in self._patterns[profile.system_id]:
            found = compiled.search(text) is not None
            if found != pattern.trigger_when_absent:
                triggered.append(TriggeredRule(
                    rule_id=pattern.pattern_id,
                    category=pattern.category,
                    severity=profile.classify_severity(pattern.penalty),
                    penalty=pattern.penalty,
                    description=pattern.description,
                    recommendation=pattern.recommendation,
                ))

        score = max(0.0, 1.0 - sum(rule.penalty for rule in triggered))
        logger.debug(f"{profile.system_id}: score={score:.3f}, rules={[r.rule_id for r in triggered]}")
        return ATSSystemSimulationResult(
            system_id=profile.system_id,
            display_name=profile.display_name,
            score=round(score, 4),
            triggered_rules=triggered,
        )

    @staticmethod
    def _structural_rules(profile: ATSSystemProfile, parsing: ParsingAnalysis) -> List[TriggeredRule]:
        rules = profile.structural_rules
        found = set(parsing.section_names)
        triggered = []

        def trigger(rule_id, category, penalty, description, recommendation):
            if penalty > 0:
                triggered.append(TriggeredRule(
                    rule_id=f"{profile.system_id}_{rule_id}",
                    category=category,
                    severity=profile.classify_severity(penalty),
                    penalty=penalty,
                    description=description,
                    recommendation=recommendation,
                ))

        missing = [s for s in rules.required_sections if s not in found]
        if missing:
            trigger(
                "missing_sections", "section_headers",
                min(len(missing) * rules.missing_section_penalty, rules.max_section_penalty),
                f"Expected sections not found: {', '.join(missing)}",
                f"Add clearly labelled section headings ({', '.join(s.title() for s in missing)}).",
            )
        if rules.min_recognized_sections and len(found) < rules.min_recognized_sections:
            trigger(
                "unrecognized_layout", "section_headers", rules.unrecognized_layout_penalty,
                f"Only {len(found)} standard section headings recognized",
                "Use conventional headings such as Experience, Education and Skills.",
            )
        if rules.require_email and not parsing.contact.email_detected:
            trigger("missing_email", "contact_info", rules.missing_contact_penalty,
                    "No e-mail address found", "Put your e-mail address in plain text near the top.")
        if rules.require_phone and not parsing.contact.phone_detected:
            trigger("missing_phone", "contact_info", rules.missing_contact_penalty,
                    "No phone number found", "Add a phone number in a standard format, e.g. (555) 123-4567.")
        return triggered

    # ------------------------------------------------------------ keywords & advice

    @staticmethod
    def check_keywords(resume_text: str, target_keywords: Iterable[str]) -> KeywordExtraction:
        """Report which target keywords appear anywhere in the resume"""
        document = TokenizedText(resume_text)
        found, missing, seen = [], [], set()
        for keyword in target_keywords:
            normalized = normalize_term(keyword or "")
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            (found if document.contains(normalized) else missing).append(keyword)

        total = len(found) + len(missing)
        return KeywordExtraction(
            keywords_found=found,
            keywords_missing=missing,
            coverage=round(len(found) / total, 4) if total else 0.0,
        )

    @staticmethod
    def _recommendations(system_results: List[ATSSystemSimulationResult]) -> List[OptimizationRecommendation]:
        grouped: Dict[str, dict] = {}
        for result in system_results:
            for rule in result.triggered_rules:
                entry = grouped.setdefault(rule.category, {
                    "penalty": 0.0, "systems": [], "rule_ids": [],
                    "severity": rule.severity, "recommendation": rule.recommendation,
                })
                entry["penalty"] += rule.penalty
                if result.system_id not in entry["systems"]:
                    entry["systems"].append(result.system_id)
                entry["rule_ids"].append(rule.rule_id)
                if SEVERITY_RANK[rule.severity] > SEVERITY_RANK[entry["severity"]]:
                    entry["severity"] = rule.severity

        recommendations = [
            OptimizationRecommendation(
                category=category,
                severity=entry["severity"],
                total_penalty=round(entry["penalty"], 4),
                affected_systems=entry["systems"],
                rule_ids=entry["rule_ids"],
                recommendation=entry["recommendation"],
            )
            for category, entry in grouped.items()
        ]
        recommendations.sort(key=lambda r: (-r.total_penalty, r.category))
        return recommendations
