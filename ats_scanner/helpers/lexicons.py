"""
Static lexicons shared by the extractor, matcher and classifier.

Industry profiles are registered in priority order; that order breaks ties
between equally scored industries.
"""
import re
from typing import Dict, Tuple

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from ats_scanner.models.reference import Credential, IndustryProfile, LexiconTerm

GENERAL_INDUSTRY = "general"

# words common to job postings that carry no skill signal on their own
JOB_POSTING_WORDS = frozenset("""
ability able candidate candidates company excellent good great ideal including job looking join plus
preferred required requirements responsibilities responsible role seeking skills strong successful team
understanding using work working year years experience experienced knowledge familiarity proficiency
proficient opportunity position new based help various key
""".split())

STOP_WORDS = ENGLISH_STOP_WORDS | JOB_POSTING_WORDS

# canonical -> variants, applied in every industry
GLOBAL_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "javascript": ("js", "node.js", "nodejs", "ecmascript"),
    "typescript": ("ts",),
    "python": ("py", "python3"),
    "c++": ("cpp", "cplusplus"),
    "c#": ("csharp", "c sharp"),
    "react": ("reactjs", "react.js"),
    "angular": ("angularjs", "angular.js"),
    "vue": ("vuejs", "vue.js"),
    "postgresql": ("postgres", "psql"),
    "mongodb": ("mongo",),
    "mysql": ("my sql",),
    "amazon web services": ("aws",),
    "google cloud platform": ("gcp", "google cloud"),
    "microsoft azure": ("azure",),
    "kubernetes": ("k8s",),
    "docker": ("containerization", "containers"),
    "machine learning": ("ml",),
    "artificial intelligence": ("ai",),
    "continuous integration": ("ci/cd", "ci", "continuous delivery"),
    "team leadership": ("team lead", "led a team", "led teams", "leading teams", "people management"),
    "project management": ("program management", "project coordination"),
}

# categories for global phrases that are not tied to one industry
GENERAL_TERMS: Tuple[LexiconTerm, ...] = (
    LexiconTerm(term="team leadership", weight=1.5, category="leadership"),
    LexiconTerm(term="project management", weight=1.5, category="leadership"),
    LexiconTerm(term="stakeholder management", weight=1.3, category="leadership"),
    LexiconTerm(term="cross-functional", weight=1.2, category="leadership"),
    LexiconTerm(term="communication skills", weight=1.0, category="soft_skill"),
    LexiconTerm(term="problem solving", weight=1.0, category="soft_skill"),
    LexiconTerm(term="data analysis", weight=1.3, category="skill"),
    LexiconTerm(term="machine learning", weight=1.6, category="skill"),
    LexiconTerm(term="artificial intelligence", weight=1.4, category="skill"),
    LexiconTerm(term="continuous integration", weight=1.3, category="methodology"),
)

TECHNOLOGY = IndustryProfile(
    industry_id="technology",
    display_name="Technology",
    aliases=("software", "it", "tech", "computer science", "information technology", "engineering"),
    terms=(
        LexiconTerm(term="software", weight=3.0, category="domain"),
        LexiconTerm(term="programming", weight=3.0, category="skill"),
        LexiconTerm(term="developer", weight=3.0, category="domain"),
        LexiconTerm(term="engineer", weight=2.0, category="domain"),
        LexiconTerm(term="api", weight=2.0, category="skill"),
        LexiconTerm(term="rest api", weight=2.0, category="skill"),
        LexiconTerm(term="database", weight=2.0, category="skill"),
        LexiconTerm(term="microservices", weight=2.0, category="skill"),
        LexiconTerm(term="javascript", weight=3.0, category="programming_language"),
        LexiconTerm(term="typescript", weight=2.5, category="programming_language"),
        LexiconTerm(term="python", weight=3.0, category="programming_language"),
        LexiconTerm(term="java", weight=2.5, category="programming_language"),
        LexiconTerm(term="golang", weight=2.0, category="programming_language"),
        LexiconTerm(term="rust", weight=2.0, category="programming_language"),
        LexiconTerm(term="c++", weight=2.0, category="programming_language"),
        LexiconTerm(term="c#", weight=2.0, category="programming_language"),
        LexiconTerm(term="sql", weight=2.0, category="programming_language"),
        LexiconTerm(term="react", weight=2.5, category="framework"),
        LexiconTerm(term="angular", weight=2.0, category="framework"),
        LexiconTerm(term="vue", weight=2.0, category="framework"),
        LexiconTerm(term="django", weight=2.0, category="framework"),
        LexiconTerm(term="flask", weight=2.0, category="framework"),
        LexiconTerm(term="spring boot", weight=2.0, category="framework"),
        LexiconTerm(term="node", weight=2.0, category="framework"),
        LexiconTerm(term="amazon web services", weight=2.5, category="cloud"),
        LexiconTerm(term="google cloud platform", weight=2.0, category="cloud"),
        LexiconTerm(term="microsoft azure", weight=2.0, category="cloud"),
        LexiconTerm(term="cloud", weight=2.0, category="cloud"),
        LexiconTerm(term="devops", weight=3.0, category="methodology"),
        LexiconTerm(term="agile", weight=1.5, category="methodology"),
        LexiconTerm(term="scrum", weight=1.5, category="methodology"),
        LexiconTerm(term="git", weight=2.0, category="tool"),
        LexiconTerm(term="docker", weight=2.5, category="tool"),
        LexiconTerm(term="kubernetes", weight=2.5, category="tool"),
        LexiconTerm(term="terraform", weight=2.0, category="tool"),
        LexiconTerm(term="linux", weight=1.5, category="tool"),
        LexiconTerm(term="postgresql", weight=1.8, category="tool"),
        LexiconTerm(term="mongodb", weight=1.8, category="tool"),
        LexiconTerm(term="mysql", weight=1.8, category="tool"),
        LexiconTerm(term="redis", weight=1.5, category="tool"),
        LexiconTerm(term="kafka", weight=1.8, category="tool"),
    ),
    synonyms={
        "golang": ("go lang",),
        "rest api": ("restful api", "restful apis", "rest apis"),
        "microservices": ("micro-services", "microservice architecture"),
    },
    credentials=(
        Credential(name="aws certified", importance=0.9, alternatives=("azure certified", "google cloud certified")),
        Credential(name="certified kubernetes administrator", importance=0.8, alternatives=("docker certified associate",)),
        Credential(name="certified scrum master", importance=0.5, alternatives=("professional scrum master",)),
    ),
    level_signals={
        "senior": ("system design", "architecture", "code review"),
        "lead": ("tech lead", "technical lead", "engineering manager", "staff engineer", "principal engineer"),
        "executive": ("cto", "vp of engineering", "head of engineering"),
    },
    related_industries=("consulting", "finance"),
)

HEALTHCARE = IndustryProfile(
    industry_id="healthcare",
    display_name="Healthcare",
    aliases=("medical", "pharmaceutical", "biotech", "health"),
    terms=(
        LexiconTerm(term="medical", weight=3.0, category="domain"),
        LexiconTerm(term="healthcare", weight=3.0, category="domain"),
        LexiconTerm(term="patient", weight=3.0, category="domain"),
        LexiconTerm(term="patient care", weight=3.0, category="skill"),
        LexiconTerm(term="clinical", weight=3.0, category="domain"),
        LexiconTerm(term="hospital", weight=2.5, category="domain"),
        LexiconTerm(term="physician", weight=2.5, category="domain"),
        LexiconTerm(term="nurse", weight=2.5, category="domain"),
        LexiconTerm(term="nursing", weight=2.5, category="skill"),
        LexiconTerm(term="treatment", weight=2.0, category="skill"),
        LexiconTerm(term="diagnosis", weight=2.0, category="skill"),
        LexiconTerm(term="pharmaceutical", weight=2.5, category="domain"),
        LexiconTerm(term="biomedical", weight=2.5, category="domain"),
        LexiconTerm(term="surgery", weight=2.0, category="skill"),
        LexiconTerm(term="therapy", weight=2.0, category="skill"),
        LexiconTerm(term="medical device", weight=2.5, category="domain"),
        LexiconTerm(term="clinical trial", weight=2.5, category="skill"),
        LexiconTerm(term="hipaa", weight=2.0, category="regulation"),
        LexiconTerm(term="fda", weight=2.0, category="regulation"),
        LexiconTerm(term="electronic health records", weight=2.0, category="tool"),
        LexiconTerm(term="epic", weight=1.5, category="tool"),
    ),
    synonyms={
        "electronic health records": ("ehr", "emr", "electronic medical records"),
        "physician": ("doctor", "md"),
        "nurse": ("rn", "registered nurse"),
    },
    credentials=(
        Credential(name="registered nurse", importance=0.9, alternatives=("rn", "lpn")),
        Credential(name="bls", importance=0.7, alternatives=("basic life support", "acls")),
        Credential(name="chps", importance=0.5, alternatives=("chpc",)),
    ),
    level_signals={
        "entry": ("resident", "medical assistant"),
        "senior": ("attending", "charge nurse"),
        "lead": ("nurse manager", "clinical lead"),
        "executive": ("chief medical officer", "director of nursing"),
    },
    related_industries=("education",),
)

FINANCE = IndustryProfile(
    industry_id="finance",
    display_name="Finance",
    aliases=("banking", "investment", "fintech", "accounting", "financial services"),
    terms=(
        LexiconTerm(term="financial", weight=3.0, category="domain"),
        LexiconTerm(term="banking", weight=3.0, category="domain"),
        LexiconTerm(term="investment", weight=3.0, category="domain"),
        LexiconTerm(term="trading", weight=2.5, category="skill"),
        LexiconTerm(term="accounting", weight=2.5, category="skill"),
        LexiconTerm(term="finance", weight=3.0, category="domain"),
        LexiconTerm(term="portfolio", weight=2.0, category="skill"),
        LexiconTerm(term="risk management", weight=2.5, category="skill"),
        LexiconTerm(term="compliance", weight=2.0, category="regulation"),
        LexiconTerm(term="audit", weight=2.0, category="skill"),
        LexiconTerm(term="credit", weight=2.0, category="domain"),
        LexiconTerm(term="loan", weight=2.0, category="domain"),
        LexiconTerm(term="mortgage", weight=2.0, category="domain"),
        LexiconTerm(term="derivatives", weight=2.5, category="domain"),
        LexiconTerm(term="securities", weight=2.5, category="domain"),
        LexiconTerm(term="fintech", weight=3.0, category="domain"),
        LexiconTerm(term="blockchain", weight=2.0, category="skill"),
        LexiconTerm(term="financial modeling", weight=2.5, category="skill"),
        LexiconTerm(term="sox", weight=2.0, category="regulation"),
        LexiconTerm(term="budget", weight=1.5, category="skill"),
    ),
    synonyms={
        "financial modeling": ("financial modelling", "financial models"),
        "sox": ("sarbanes-oxley",),
    },
    credentials=(
        Credential(name="cpa", importance=0.95, alternatives=("cma", "certified public accountant")),
        Credential(name="cfa", importance=0.9, alternatives=("frm", "chartered financial analyst")),
    ),
    level_signals={
        "entry": ("analyst i", "junior analyst"),
        "senior": ("senior accountant", "vice president"),
        "lead": ("finance manager", "controller"),
        "executive": ("cfo", "managing director", "treasurer"),
    },
    related_industries=("consulting", "technology"),
)

EDUCATION = IndustryProfile(
    industry_id="education",
    display_name="Education",
    aliases=("academic", "research", "training", "teaching"),
    terms=(
        LexiconTerm(term="education", weight=3.0, category="domain"),
        LexiconTerm(term="teaching", weight=3.0, category="skill"),
        LexiconTerm(term="professor", weight=2.5, category="domain"),
        LexiconTerm(term="university", weight=2.5, category="domain"),
        LexiconTerm(term="school", weight=2.0, category="domain"),
        LexiconTerm(term="curriculum", weight=2.0, category="skill"),
        LexiconTerm(term="curriculum development", weight=2.5, category="skill"),
        LexiconTerm(term="student", weight=2.0, category="domain"),
        LexiconTerm(term="research", weight=2.5, category="skill"),
        LexiconTerm(term="academic", weight=3.0, category="domain"),
        LexiconTerm(term="instruction", weight=2.0, category="skill"),
        LexiconTerm(term="pedagogy", weight=2.5, category="skill"),
        LexiconTerm(term="classroom", weight=2.0, category="domain"),
        LexiconTerm(term="classroom management", weight=2.5, category="skill"),
        LexiconTerm(term="lesson planning", weight=2.0, category="skill"),
        LexiconTerm(term="scholarship", weight=2.0, category="domain"),
    ),
    synonyms={
        "lesson planning": ("lesson plans", "lesson design"),
        "teaching": ("instructing", "tutoring"),
    },
    credentials=(
        Credential(name="teaching license", importance=0.9, alternatives=("teaching certificate", "teacher certification")),
        Credential(name="tesol", importance=0.5, alternatives=("tefl", "celta")),
    ),
    level_signals={
        "entry": ("teaching assistant", "student teacher"),
        "senior": ("associate professor", "senior lecturer"),
        "lead": ("department head", "department chair"),
        "executive": ("dean", "provost", "principal of", "superintendent"),
    },
    related_industries=("healthcare",),
)

MANUFACTURING = IndustryProfile(
    industry_id="manufacturing",
    display_name="Manufacturing",
    aliases=("industrial", "production", "operations"),
    terms=(
        LexiconTerm(term="manufacturing", weight=3.0, category="domain"),
        LexiconTerm(term="production", weight=2.5, category="domain"),
        LexiconTerm(term="lean manufacturing", weight=2.5, category="methodology"),
        LexiconTerm(term="six sigma", weight=2.5, category="methodology"),
        LexiconTerm(term="quality control", weight=2.5, category="skill"),
        LexiconTerm(term="quality assurance", weight=2.0, category="skill"),
        LexiconTerm(term="supply chain", weight=2.5, category="skill"),
        LexiconTerm(term="assembly", weight=2.0, category="domain"),
        LexiconTerm(term="plant", weight=2.0, category="domain"),
        LexiconTerm(term="cad", weight=2.0, category="tool"),
        LexiconTerm(term="iso 9001", weight=2.0, category="regulation"),
        LexiconTerm(term="inventory", weight=1.5, category="skill"),
        LexiconTerm(term="osha", weight=2.0, category="regulation"),
    ),
    synonyms={
        "cad": ("autocad", "solidworks"),
        "lean manufacturing": ("lean", "kaizen"),
    },
    credentials=(
        Credential(name="six sigma green belt", importance=0.8, alternatives=("six sigma black belt",)),
        Credential(name="pmp", importance=0.6, alternatives=("capm",)),
    ),
    level_signals={
        "lead": ("shift supervisor", "production supervisor"),
        "executive": ("plant manager", "vp of operations"),
    },
    related_industries=("consulting",),
)

CONSULTING = IndustryProfile(
    industry_id="consulting",
    display_name="Consulting",
    aliases=("advisory", "professional services", "management consulting"),
    terms=(
        LexiconTerm(term="consulting", weight=3.0, category="domain"),
        LexiconTerm(term="consultant", weight=2.5, category="domain"),
        LexiconTerm(term="client", weight=2.0, category="domain"),
        LexiconTerm(term="client engagement", weight=2.5, category="skill"),
        LexiconTerm(term="business analysis", weight=2.5, category="skill"),
        LexiconTerm(term="strategy", weight=2.0, category="skill"),
        LexiconTerm(term="process improvement", weight=2.0, category="skill"),
        LexiconTerm(term="change management", weight=2.0, category="skill"),
        LexiconTerm(term="advisory", weight=2.0, category="domain"),
        LexiconTerm(term="deliverables", weight=1.5, category="domain"),
    ),
    synonyms={
        "client engagement": ("client relationships", "client management"),
    },
    credentials=(
        Credential(name="pmp", importance=0.7, alternatives=("prince2",)),
        Credential(name="cmc", importance=0.5, alternatives=()),
    ),
    level_signals={
        "entry": ("associate consultant", "business analyst"),
        "senior": ("senior consultant",),
        "lead": ("engagement manager",),
        "executive": ("partner", "managing partner"),
    },
    related_industries=("finance", "technology"),
)

INDUSTRY_PROFILES: Tuple[IndustryProfile, ...] = (
    TECHNOLOGY,
    HEALTHCARE,
    FINANCE,
    EDUCATION,
    MANUFACTURING,
    CONSULTING,
)

# ---------------------------------------------------------------- role levels

ROLE_LEVELS: Tuple[str, ...] = ("entry", "mid", "senior", "lead", "executive")
ROLE_LEVEL_PRIORITY: Tuple[str, ...] = ("mid", "senior", "lead", "entry", "executive")
DEFAULT_ROLE_LEVEL = "mid"

ROLE_LEVEL_ALIASES: Dict[str, str] = {
    "junior": "entry",
    "intern": "entry",
    "graduate": "entry",
    "entry-level": "entry",
    "entry level": "entry",
    "mid-level": "mid",
    "intermediate": "mid",
    "sr": "senior",
    "staff": "senior",
    "principal": "lead",
    "manager": "lead",
    "director": "executive",
    "vp": "executive",
    "cto": "executive",
    "ceo": "executive",
}

DEFAULT_LEVEL_SIGNALS: Dict[str, Tuple[str, ...]] = {
    "entry": ("junior", "entry level", "entry-level", "intern", "internship", "graduate", "trainee", "recent graduate"),
    "mid": ("mid-level", "mid level", "intermediate", "independently", "specialist"),
    "senior": ("senior", "sr.", "expert", "architect", "mentored", "mentoring", "designed"),
    "lead": ("lead", "team lead", "principal", "manager", "project manager", "scrum master", "supervised"),
    "executive": ("director", "vp", "vice president", "chief", "head of", "executive", "c-level"),
}

# (phrase, weight, level credited)
SCOPE_INDICATORS: Tuple[Tuple[str, float, str], ...] = (
    ("budget", 1.6, "lead"),
    ("hiring", 1.5, "lead"),
    ("strategy", 1.5, "executive"),
    ("roadmap", 1.3, "lead"),
    ("stakeholder", 1.4, "senior"),
    ("cross-functional", 1.3, "senior"),
    ("p&l", 2.0, "executive"),
    ("organization-wide", 1.5, "executive"),
)

EXPERIENCE_PATTERNS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"(\d{1,2})\+?\s*years?\s+(?:of\s+)?(?:experience|exp)\b", re.IGNORECASE),
    re.compile(r"(\d{1,2})\+?\s*yrs?\.?\s+(?:of\s+)?(?:experience|exp)\b", re.IGNORECASE),
    re.compile(r"\bover\s+(\d{1,2})\s+years?", re.IGNORECASE),
    re.compile(r"\bmore than\s+(\d{1,2})\s+years?", re.IGNORECASE),
)

# (upper bound inclusive, level); anything above the last bound is executive
YEARS_TO_LEVEL: Tuple[Tuple[int, str], ...] = (
    (2, "entry"),
    (5, "mid"),
    (8, "senior"),
    (12, "lead"),
)

LEADERSHIP_PATTERNS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\b(?:led|managed|supervised|directed|coordinated|oversaw)\s+(?:a\s+)?(?:team|group|department|division)", re.IGNORECASE),
    re.compile(r"\b(?:managed|supervised)\s+\d+\s+(?:people|employees|staff|members|engineers|developers)", re.IGNORECASE),
    re.compile(r"\b(?:team\s+lead|team\s+leader|project\s+manager|scrum\s+master|tech\s+lead)\b", re.IGNORECASE),
    re.compile(r"\b(?:mentored|coached|trained)\s+(?:junior|new|team)", re.IGNORECASE),
    re.compile(r"\bteam\s+of\s+\d+", re.IGNORECASE),
)

LEADERSHIP_KEYWORDS: Tuple[str, ...] = (
    "led", "managed", "supervised", "directed", "coordinated", "mentored",
    "team lead", "project manager", "scrum master", "architect", "principal",
)

# ---------------------------------------------------------------- education

DEGREE_TIERS: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("phd", "ph.d", "doctorate", "doctoral"), 40.0),
    (("master", "masters", "mba", "m.s.", "msc"), 30.0),
    (("bachelor", "bachelors", "b.s.", "b.a.", "bsc", "degree"), 20.0),
    (("associate degree", "diploma", "certificate program"), 10.0),
)

RELEVANT_FIELDS: Tuple[str, ...] = ("computer science", "engineering", "mathematics", "statistics", "nursing", "finance", "accounting", "education")
CONTINUING_EDUCATION: Tuple[str, ...] = ("certification", "certified", "course", "training", "bootcamp", "workshop")
