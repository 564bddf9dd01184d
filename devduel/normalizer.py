"""Raw acquisition payload -> CanonicalProfile, one mapping per platform.

Everything here is pure: no I/O, no randomness. Payload values come from
third parties and are coerced on read; a wrong type degrades to the
field's default instead of failing the duel.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any

from devduel.models import (
    ActivityMetrics,
    CanonicalProfile,
    Company,
    Education,
    Project,
    RawAcquisition,
)
from devduel.tables import ENCYCLOPEDIA_LEADERSHIP_KEYWORDS, NATIONALITIES, ROLE_TITLE_KEYWORDS

logger = logging.getLogger(__name__)

MAX_SKILLS = 20
MAX_PROJECTS = 10
MAX_ACHIEVEMENTS = 10

_YEARS_RE = re.compile(r"(\d+)\s*(?:year|yr)", re.IGNORECASE)
_MONTHS_RE = re.compile(r"(\d+)\s*(?:month|mo)", re.IGNORECASE)
_FOUR_DIGIT_YEAR_RE = re.compile(r"(\d{4})")
_LEADING_NUMBER_RE = re.compile(r"^\s*([\d,]+)")

_INTRO_COMPANY_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?:CEO|chief executive officer) of (\w[\w\s]*)", re.IGNORECASE), "CEO"),
    (re.compile(r"(?:co-?founder|founder) of (\w[\w\s]*)", re.IGNORECASE), "Founder"),
    (re.compile(r"(?:chairman|chair) of (\w[\w\s]*)", re.IGNORECASE), "Chairman"),
    (re.compile(r"(?:president) of (\w[\w\s]*)", re.IGNORECASE), "President"),
    (re.compile(r"(?:CTO|chief technology officer) of (\w[\w\s]*)", re.IGNORECASE), "CTO"),
]


# --- coercion helpers ---

def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _split(text: str, separators: str) -> list[str]:
    return [part.strip() for part in re.split(f"[{separators}]", text) if part.strip()]


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _leading_number(value: Any) -> int:
    """Numeric prefix of a DOM string like ``"1,234 contributions in the last year"``."""
    if isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if match and match.group(1).replace(",", ""):
            return int(match.group(1).replace(",", ""))
        return 0
    return _int(value)


# --- dispatch ---

def normalize(raw: RawAcquisition) -> CanonicalProfile:
    """Map a raw acquisition onto the canonical profile shape.

    Synthetic acquisitions already carry a CanonicalProfile and are returned
    unchanged.
    """
    if raw.synthetic:
        return raw.payload["profile"]

    if raw.platform == "linkedin":
        profile = normalize_linkedin(raw.payload)
    elif raw.platform == "github":
        profile = normalize_github(raw.payload)
    elif raw.platform == "wikipedia":
        profile = normalize_wikipedia(raw.payload)
    else:
        profile = normalize_generic(raw.payload)

    if not profile.source_url:
        profile.source_url = raw.source_url
    logger.debug("Normalized %s profile: %s", raw.platform, profile.name)
    return profile


# --- LinkedIn ---

def parse_duration_months(duration: str) -> int:
    """Months in a LinkedIn duration like ``"2 yrs 3 mos"``. Unparseable -> 0."""
    months = 0
    years_match = _YEARS_RE.search(duration)
    months_match = _MONTHS_RE.search(duration)
    if years_match:
        months += int(years_match.group(1)) * 12
    if months_match:
        months += int(months_match.group(1))
    return months


def _linkedin_years(
    experiences: list[dict[str, Any]],
    certs: list[dict[str, Any]],
    orgs: list[dict[str, Any]],
    companies: list[Company],
) -> int:
    if experiences:
        total_months = sum(parse_duration_months(_str(exp.get("duration"))) for exp in experiences)
        return math.floor(total_months / 12 + 0.5)
    return 3 if max(len(certs), len(orgs), len(companies)) > 0 else 0


def _linkedin_education(data: dict[str, Any]) -> list[Education]:
    entries = data.get("education")
    if isinstance(entries, list):
        return [
            Education(
                institution=_str(edu.get("school_name")) or _str(edu.get("school")),
                degree=_str(edu.get("degree")),
                field=_str(edu.get("field_of_study")),
            )
            for edu in _dicts(entries)
        ]
    details = _str(data.get("educations_details"))
    return [Education(institution=details)] if details else []


def normalize_linkedin(data: dict[str, Any]) -> CanonicalProfile:
    experiences = _dicts(data.get("experience"))
    certs = _dicts(data.get("certifications"))
    orgs = _dicts(data.get("organizations"))
    langs = _dicts(data.get("languages"))
    current_company = data.get("current_company") if isinstance(data.get("current_company"), dict) else {}

    position = _str(data.get("position"))
    company_name = _str(data.get("current_company_name")) or _str(current_company.get("name"))
    title = position or (f"Professional at {company_name}" if company_name else "")

    companies: list[Company] = []
    if company_name:
        companies.append(Company(name=company_name, role=position or "Professional", current=True))
    for exp in experiences:
        companies.append(
            Company(
                name=_str(exp.get("company")) or _str(exp.get("company_name")),
                role=_str(exp.get("title")),
                duration=_str(exp.get("duration")),
                current=bool(exp.get("is_current")),
            )
        )

    cert_titles = [_str(c.get("title")) for c in certs if _str(c.get("title"))]
    lang_titles = [_str(lang.get("title")) for lang in langs if _str(lang.get("title"))]

    certifications = []
    for cert in certs:
        cert_title = _str(cert.get("title"))
        issuer = _str(cert.get("subtitle"))
        rendered = f"{cert_title} ({issuer})" if issuer else cert_title
        if rendered:
            certifications.append(rendered)

    name = (
        _str(data.get("name"))
        or _str(data.get("full_name"))
        or " ".join(p for p in (_str(data.get("first_name")), _str(data.get("last_name"))) if p)
        or "Unknown"
    )

    return CanonicalProfile(
        name=name,
        title=title,
        avatar=_str(data.get("avatar")) or _str(data.get("profile_picture")),
        location=_str(data.get("city")) or _str(data.get("location")),
        skills=(cert_titles + lang_titles)[:MAX_SKILLS],
        years_experience=_linkedin_years(experiences, certs, orgs, companies),
        leadership_roles=[
            _str(exp.get("title"))
            for exp in experiences
            if any(kw in _str(exp.get("title")).lower() for kw in ROLE_TITLE_KEYWORDS)
        ],
        achievements=cert_titles,
        activity_metrics=ActivityMetrics(
            connections=_int(data.get("connections")),
            followers=_int(data.get("followers")),
            posts=0,
        ),
        certifications=certifications,
        companies=companies,
        education=_linkedin_education(data),
        summary=_str(data.get("about")) or _str(data.get("summary")),
        source_url=_str(data.get("url")) or _str(data.get("input_url")),
        source_type="linkedin",
    )


# --- GitHub ---

def skills_from_repos(repos: list[dict[str, Any]]) -> list[str]:
    skills: list[str] = []
    for repo in repos:
        language = _str(repo.get("language"))
        if language:
            skills.append(language)
        skills.extend(_strings(repo.get("languages")))
        skills.extend(_strings(repo.get("topics")))
    return _dedupe(skills)[:MAX_SKILLS]


def estimate_github_years(created_at: Any, current_year: int | None = None) -> int:
    match = _FOUR_DIGIT_YEAR_RE.match(_str(created_at))
    if not match:
        return 0
    current_year = current_year or datetime.now().year
    return max(1, current_year - int(match.group(1)))


def _github_achievements(data: dict[str, Any], repos: list[dict[str, Any]]) -> list[str]:
    achievements = []
    total_stars = sum(_int(r.get("stargazers_count")) for r in repos)
    followers = _int(data.get("followers"))
    public_repos = _int(data.get("public_repos")) or len(repos)

    if total_stars >= 1000:
        achievements.append(f"{total_stars:,} total GitHub stars")
    if followers >= 100:
        achievements.append(f"{followers:,} GitHub followers")
    if public_repos >= 50:
        achievements.append(f"{public_repos} public repositories")
    if any(_int(r.get("stargazers_count")) >= 100 for r in repos):
        achievements.append("Maintains popular open source project")
    return achievements


def normalize_github(data: dict[str, Any]) -> CanonicalProfile:
    repos = _dicts(data.get("repositories"))
    top_repos = sorted(repos, key=lambda r: _int(r.get("stargazers_count")), reverse=True)[:MAX_PROJECTS]
    company = _str(data.get("company"))

    return CanonicalProfile(
        name=_str(data.get("name")) or _str(data.get("login")) or "Unknown",
        title=_str(data.get("bio")) or "Developer",
        avatar=_str(data.get("avatar_url")),
        location=_str(data.get("location")),
        skills=skills_from_repos(repos),
        years_experience=estimate_github_years(data.get("created_at")),
        projects=[
            Project(
                name=_str(repo.get("name")),
                description=_str(repo.get("description")),
                technologies=[_str(repo.get("language"))] if _str(repo.get("language")) else [],
                url=_str(repo.get("html_url")) or _str(repo.get("url")),
                stars=_int(repo.get("stargazers_count")),
                forks=_int(repo.get("forks_count")),
            )
            for repo in top_repos
        ],
        achievements=_github_achievements(data, repos),
        activity_metrics=ActivityMetrics(
            repositories=_int(data.get("public_repos")) or len(repos),
            followers=_int(data.get("followers")),
            following=_int(data.get("following")),
            contributions=_leading_number(data.get("contributions")),
            commits=sum(_int(r.get("commits_count")) for r in repos),
        ),
        companies=[Company(name=company.lstrip("@"), role="Developer", current=True)] if company else [],
        summary=_str(data.get("bio")),
        source_url=_str(data.get("html_url")),
        source_type="github",
    )


# --- Wikipedia ---

def infobox_lookup(infobox: dict[str, Any], *keys: str) -> str:
    """First non-empty infobox value among ``keys``, trying case/underscore variants."""
    for key in keys:
        underscored = key.replace(" ", "_")
        for variant in (key, key.lower(), underscored, underscored.lower()):
            value = infobox.get(variant)
            if value:
                return str(value)
    return ""


def nationality_from_text(*texts: str) -> str:
    for text in texts:
        if not text:
            continue
        for nationality in NATIONALITIES:
            if nationality in text:
                return nationality
    return ""


def companies_from_intro(intro: str, companies: list[Company]) -> None:
    """Append ``<role> of <Org>`` mentions from the lead paragraph, skipping known names."""
    known = {c.name.lower() for c in companies}
    for pattern, role in _INTRO_COMPANY_PATTERNS:
        for match in pattern.finditer(intro):
            company_name = re.sub(r"[.,;]$", "", match.group(1).strip()).strip()
            if company_name and len(company_name) < 50 and company_name.lower() not in known:
                companies.append(Company(name=company_name, role=role, current=True))
                known.add(company_name.lower())


def estimate_wikipedia_years(born: str, intro: str, current_year: int | None = None) -> int:
    match = _FOUR_DIGIT_YEAR_RE.search(born)
    if match:
        career_start = int(match.group(1)) + 22
        return max(1, (current_year or datetime.now().year) - career_start)
    lowered = intro.lower()
    if "veteran" in lowered or "pioneer" in lowered:
        return 25
    if "senior" in lowered or "experienced" in lowered:
        return 15
    return 10


def _wikipedia_leadership(intro: str, occupation: str) -> list[str]:
    combined = f"{intro} {occupation}".lower()
    return [kw.capitalize() for kw in ENCYCLOPEDIA_LEADERSHIP_KEYWORDS if kw in combined]


def normalize_wikipedia(data: dict[str, Any]) -> CanonicalProfile:
    name = _str(data.get("title")) or _str(data.get("name")) or "Unknown"
    intro = _str(data.get("intro")) or _str(data.get("first_paragraph"))
    description = _str(data.get("description"))
    infobox = data.get("infobox") if isinstance(data.get("infobox"), dict) else {}

    def ib(*keys: str) -> str:
        return infobox_lookup(infobox, *keys)

    born = ib("Born", "birth_date") or _str(data.get("born"))
    occupation = ib("Occupation", "Title") or _str(data.get("occupation"))
    nationality = ib("Nationality", "Citizenship") or _str(data.get("nationality"))
    education = ib("Education", "Alma mater")
    awards = ib("Awards", "honors") or _str(data.get("awards"))
    employer = ib("Employer", "Organization")
    known_for = ib("Known for")
    title_field = ib("Title")

    occupation_items = _split(occupation, r",\n")
    if occupation_items:
        display_title = occupation_items[0]
    elif description:
        display_title = description[0].upper() + description[1:]
    else:
        display_title = "Notable Figure"

    skills = [
        s for s in _split(occupation, r",;&\n") + _split(known_for, r",;&\n")
        if 1 < len(s) < 80
    ][:MAX_SKILLS]

    companies: list[Company] = []
    if employer:
        companies.extend(Company(name=e, role=display_title, current=True) for e in _split(employer, r",;&\n"))
    elif title_field:
        companies.extend(Company(name=t, role=display_title, current=True) for t in _split(title_field, r",;\n"))
    companies_from_intro(intro, companies)

    return CanonicalProfile(
        name=re.sub(r" - Wikipedia$", "", name),
        title=display_title,
        avatar=_str(data.get("image")) or _str(data.get("thumbnail")) or _str(infobox.get("image")),
        location=nationality or nationality_from_text(description, intro),
        skills=skills,
        years_experience=estimate_wikipedia_years(born, intro),
        leadership_roles=_wikipedia_leadership(intro, occupation),
        achievements=[a for a in _split(awards, r",;\n") if len(a) > 2][:MAX_ACHIEVEMENTS],
        activity_metrics=ActivityMetrics(followers=0, posts=0),
        companies=companies,
        education=[Education(institution=e) for e in _split(education, r",;&\n") if len(e) > 1],
        summary=intro[:500],
        source_url=_str(data.get("url")),
        source_type="wikipedia",
    )


# --- generic ---

_METRIC_FIELDS = (
    "commits", "contributions", "followers", "following", "repositories",
    "pull_requests", "issues", "posts", "connections",
)


def _generic_metrics(value: Any) -> ActivityMetrics:
    if not isinstance(value, dict):
        return ActivityMetrics()
    return ActivityMetrics(**{k: _int(value[k]) for k in _METRIC_FIELDS if k in value})


def normalize_generic(data: dict[str, Any]) -> CanonicalProfile:
    """Same-named keys map straight across; lists of dicts become typed records."""
    return CanonicalProfile(
        name=_str(data.get("name")) or _str(data.get("title")) or "Unknown Warrior",
        title=_str(data.get("title")) or _str(data.get("role")) or "Developer",
        avatar=_str(data.get("avatar")),
        location=_str(data.get("location")),
        skills=_strings(data.get("skills")),
        years_experience=_int(data.get("years_experience")) or _int(data.get("experience")),
        leadership_roles=_strings(data.get("leadership_roles")),
        projects=[
            Project(
                name=_str(p.get("name")),
                description=_str(p.get("description")),
                technologies=_strings(p.get("technologies")),
                url=_str(p.get("url")),
                stars=_int(p.get("stars")),
                forks=_int(p.get("forks")),
            )
            for p in _dicts(data.get("projects"))
        ],
        achievements=_strings(data.get("achievements")),
        activity_metrics=_generic_metrics(data.get("activity_metrics")),
        certifications=_strings(data.get("certifications")),
        companies=[
            Company(
                name=_str(c.get("name")),
                role=_str(c.get("role")),
                duration=_str(c.get("duration")),
                current=bool(c.get("current")),
            )
            for c in _dicts(data.get("companies"))
        ],
        education=[
            Education(
                institution=_str(e.get("institution")),
                degree=_str(e.get("degree")),
                field=_str(e.get("field")),
                year=_int(e.get("year")) or None,
            )
            for e in _dicts(data.get("education"))
        ],
        summary=_str(data.get("summary")),
        source_type="generic",
    )
