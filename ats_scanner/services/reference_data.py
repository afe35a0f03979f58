"""
Process-wide reference data: lexicons, synonym tables, ATS profiles and weight tables.

A ReferenceData instance is built once at startup and only read afterwards, so
concurrent evaluations share it without locking.
"""
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from ats_scanner.helpers.ats_profiles import ATS_PROFILES
from ats_scanner.helpers.lexicons import (
    DEFAULT_LEVEL_SIGNALS, GENERAL_TERMS, GLOBAL_SYNONYMS, INDUSTRY_PROFILES, ROLE_LEVEL_ALIASES, ROLE_LEVELS
)
from ats_scanner.helpers.text import normalize_term
from ats_scanner.helpers.weight_tables import build_weight_tables, unknown_dimensions
from ats_scanner.models.reference import ATSSystemProfile, IndustryProfile, LexiconTerm, WeightTable
from ats_scanner.models.settings import AnalysisSettings
from ats_scanner.utils.exceptions import ConfigurationError
from ats_scanner.utils.logging_config import get_logger

logger = get_logger(__name__)

CREDENTIAL_WEIGHT = 2.0


class ReferenceData:
    """Indexed, read-only view over the registered reference records"""

    def __init__(
        self,
        industries: Iterable[IndustryProfile] = INDUSTRY_PROFILES,
        ats_profiles: Iterable[ATSSystemProfile] = ATS_PROFILES,
        weight_tables: Iterable[WeightTable] = None,
        global_synonyms: Mapping[str, Tuple[str, ...]] = GLOBAL_SYNONYMS,
        general_terms: Iterable[LexiconTerm] = GENERAL_TERMS,
    ):
        self.industries: Tuple[IndustryProfile, ...] = tuple(industries)
        self.ats_profiles: Tuple[ATSSystemProfile, ...] = tuple(ats_profiles)
        self.weight_tables: Tuple[WeightTable, ...] = tuple(
            build_weight_tables() if weight_tables is None else weight_tables
        )
        self._global_synonyms = dict(global_synonyms)
        self._general_terms = tuple(general_terms)

        _ensure_unique([p.industry_id for p in self.industries], "industry profile")
        _ensure_unique([p.system_id for p in self.ats_profiles], "ATS system profile")
        _ensure_unique([t.key for t in self.weight_tables], "weight table")
        _ensure_known_dimensions(self.weight_tables)

        self._industry_index = MappingProxyType({p.industry_id: p for p in self.industries})
        self._weight_index = MappingProxyType({(t.industry, t.role_level): t for t in self.weight_tables})

        aliases: Dict[str, str] = {}
        for profile in self.industries:
            aliases.setdefault(profile.industry_id, profile.industry_id)
            for alias in profile.aliases:
                aliases.setdefault(normalize_term(alias), profile.industry_id)
        self._alias_index = MappingProxyType(aliases)

        self._build_term_indexes()
        logger.info(
            f"Reference data ready: {len(self.industries)} industries, {len(self.ats_profiles)} ATS systems, "
            f"{len(self.weight_tables)} weight tables, {len(self._term_index)} lexicon terms"
        )

    def _build_term_indexes(self):
        terms: Dict[str, LexiconTerm] = {}
        vocabularies: Dict[str, FrozenSet[str]] = {}
        global_canon = _canonical_map(self._global_synonyms)
        synonym_maps: Dict[Optional[str], Mapping[str, str]] = {None: MappingProxyType(global_canon)}

        for term in self._general_terms:
            terms.setdefault(normalize_term(term.term), term)

        for profile in self.industries:
            vocabulary = set()
            for term in profile.terms:
                normalized = normalize_term(term.term)
                terms.setdefault(normalized, term)
                vocabulary.add(normalized)
            for credential in profile.credentials:
                for name in (credential.name,) + credential.alternatives:
                    normalized = normalize_term(name)
                    terms.setdefault(normalized, LexiconTerm(term=name, weight=CREDENTIAL_WEIGHT, category="credential"))
                    vocabulary.add(normalized)

            industry_canon = dict(global_canon)
            industry_canon.update(_canonical_map(profile.synonyms))
            for variant, canonical in industry_canon.items():
                if canonical in vocabulary:
                    vocabulary.add(variant)
            synonym_maps[profile.industry_id] = MappingProxyType(industry_canon)
            vocabularies[profile.industry_id] = frozenset(vocabulary)

        phrases = set(t for t in terms if " " in t)
        for mapping in synonym_maps.values():
            phrases.update(v for v in mapping if " " in v)
            phrases.update(c for c in mapping.values() if " " in c)

        variants: Dict[Optional[str], Mapping[str, Tuple[str, ...]]] = {}
        for industry_id, mapping in synonym_maps.items():
            grouped: Dict[str, Tuple[str, ...]] = {}
            for variant, canonical in mapping.items():
                if variant != canonical:
                    grouped[canonical] = grouped.get(canonical, ()) + (variant,)
            variants[industry_id] = MappingProxyType(grouped)

        self._term_index = MappingProxyType(terms)
        self._vocabularies = MappingProxyType(vocabularies)
        self._synonym_maps = MappingProxyType(synonym_maps)
        self._variants = MappingProxyType(variants)
        self._phrases = MappingProxyType({tuple(p.split(" ")): p for p in sorted(phrases)})
        self.max_phrase_tokens = max((len(k) for k in self._phrases), default=1)

    # ------------------------------------------------------------ lookups

    def resolve_industry(self, name: Optional[str]) -> Optional[str]:
        """Map an industry name or alias to a registered industry id"""
        if not name:
            return None
        return self._alias_index.get(normalize_term(name))

    def industry(self, industry_id: Optional[str]) -> Optional[IndustryProfile]:
        if industry_id is None:
            return None
        return self._industry_index.get(industry_id)

    @staticmethod
    def resolve_role_level(level: Optional[str]) -> Optional[str]:
        if not level:
            return None
        normalized = normalize_term(level)
        if normalized in ROLE_LEVELS:
            return normalized
        return ROLE_LEVEL_ALIASES.get(normalized)

    def lexicon_term(self, normalized: str) -> Optional[LexiconTerm]:
        return self._term_index.get(normalized)

    def phrase(self, tokens: Tuple[str, ...]) -> Optional[str]:
        return self._phrases.get(tokens)

    def canonical(self, normalized: str, industry_id: Optional[str] = None) -> str:
        mapping = self._synonym_maps.get(industry_id) or self._synonym_maps[None]
        return mapping.get(normalized, normalized)

    def variants(self, normalized: str, industry_id: Optional[str] = None) -> Tuple[str, ...]:
        """Synonym variants that map onto ``normalized``"""
        mapping = self._variants.get(industry_id) or self._variants[None]
        return mapping.get(normalized, ())

    def industry_vocabulary(self, industry_id: Optional[str]) -> FrozenSet[str]:
        return self._vocabularies.get(industry_id, frozenset())

    def level_signals(self, industry_id: Optional[str]) -> Dict[str, Tuple[str, ...]]:
        """Default level signal phrases merged with the industry's own"""
        profile = self.industry(industry_id)
        merged = {}
        for level in ROLE_LEVELS:
            extra = profile.level_signals.get(level, ()) if profile else ()
            merged[level] = DEFAULT_LEVEL_SIGNALS.get(level, ()) + tuple(extra)
        return merged

    def select_weight_table(self, industry_id: Optional[str], role_level: Optional[str]) -> WeightTable:
        """Exact (industry, level), then industry default, then level default, then global default"""
        for key in ((industry_id, role_level), (industry_id, None), (None, role_level), (None, None)):
            table = self._weight_index.get(key)
            if table is not None:
                if key != (industry_id, role_level):
                    logger.debug(f"No weight table for ({industry_id}, {role_level}); using {table.key}")
                return table
        raise ConfigurationError(
            "No weight table configured for the requested industry/role level and no global default exists",
            config_key="weight_tables",
            config_value=f"{industry_id}/{role_level}",
        )

    # ------------------------------------------------------------ overrides

    def with_overrides(
        self,
        industries: Iterable[IndustryProfile] = (),
        ats_profiles: Iterable[ATSSystemProfile] = (),
    ) -> "ReferenceData":
        """A new instance where records with matching ids are replaced and new ones appended"""
        return ReferenceData(
            industries=_merge_records(self.industries, industries, "industry_id"),
            ats_profiles=_merge_records(self.ats_profiles, ats_profiles, "system_id"),
            weight_tables=self.weight_tables,
            global_synonyms=self._global_synonyms,
            general_terms=self._general_terms,
        )


def _canonical_map(synonyms: Mapping[str, Tuple[str, ...]]) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for canonical, variants in synonyms.items():
        normalized = normalize_term(canonical)
        mapping.setdefault(normalized, normalized)
        for variant in variants:
            mapping.setdefault(normalize_term(variant), normalized)
    return mapping


def _merge_records(current, overrides, id_field: str):
    merged = {getattr(r, id_field): r for r in current}
    for record in overrides:
        merged[getattr(record, id_field)] = record
    return tuple(merged.values())


def _ensure_unique(ids, label: str):
    seen = set()
    for item in ids:
        if item in seen:
            raise ConfigurationError(f"Duplicate {label}: {item}", config_key=label, config_value=item)
        seen.add(item)


def _ensure_known_dimensions(tables: Iterable[WeightTable]):
    for table in tables:
        unknown = unknown_dimensions(table.weights)
        if unknown:
            raise ConfigurationError(
                f"Weight table {table.key} names unknown dimensions: {unknown}",
                config_key="weight_tables",
                config_value=table.key,
            )


def default_reference_data(settings: AnalysisSettings = None) -> ReferenceData:
    """Built-in reference data, with configured weight tables when present"""
    weight_tables = settings.weight_tables if settings is not None else None
    return ReferenceData(weight_tables=weight_tables)
