"""
Static vocabularies shared by keyword extraction, normalization and scoring.

All tables are immutable and loaded once at import time.
"""

STOP_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "her",
    "was", "one", "our", "out", "has", "have", "had", "with", "this", "that",
    "from", "they", "will", "would", "there", "their", "what", "about",
    "which", "when", "your", "into", "who", "its", "were", "been",
})

# Multi-word and punctuated terms are matched as substrings of lower-cased text.
TECHNICAL_TERMS = (
    "python", "java", "javascript", "typescript", "react", "angular", "vue",
    "node", "django", "flask", "spring", "ruby", "rails", "php", "golang",
    "rust", "kotlin", "swift", "sql", "postgresql", "mysql", "mongodb",
    "redis", "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "linux", "git", "graphql", "rest", "api", "microservices",
    "machine learning", "data science", "tensorflow", "pytorch", "html",
    "css", "agile", "scrum", "devops", "ci/cd",
)

ROLE_TERMS = (
    "engineer", "developer", "manager", "analyst", "designer", "architect",
    "scientist", "consultant", "administrator", "specialist", "coordinator",
    "director",
)

SENIORITY_TERMS = frozenset({"sr", "sr.", "senior", "jr", "jr.", "junior"})

LEGAL_SUFFIXES = frozenset({"inc", "corp", "ltd", "llc", "limited"})

REMOTE_MARKERS = ("remote", "work from home", "wfh", "virtual", "telecommute")

# (value, phrases) pairs; first match wins.
JOB_TYPE_TERMS = (
    ("full-time", ("full-time", "full time")),
    ("part-time", ("part-time", "part time")),
    ("contract", ("contract",)),
    ("internship", ("internship",)),
    ("remote", ("remote", "work from home")),
)

EXPERIENCE_LEVEL_TERMS = (
    ("senior", ("senior", "sr.")),
    ("lead", ("lead", "principal")),
    ("executive", ("executive", "director")),
    ("entry", ("entry", "junior", "jr.")),
    ("mid", ("mid", "intermediate")),
)

JOB_TYPES = tuple(value for value, _ in JOB_TYPE_TERMS)
EXPERIENCE_LEVELS = tuple(value for value, _ in EXPERIENCE_LEVEL_TERMS)
