"""Tests for devduel/normalizer.py."""

from datetime import datetime, timezone

import pytest

from devduel.models import CanonicalProfile, Company, RawAcquisition
from devduel.normalizer import (
    companies_from_intro,
    estimate_github_years,
    estimate_wikipedia_years,
    infobox_lookup,
    nationality_from_text,
    normalize,
    normalize_generic,
    normalize_github,
    normalize_linkedin,
    normalize_wikipedia,
    parse_duration_months,
    skills_from_repos,
)


def _raw(platform, payload, synthetic=False, url="https://example.com/someone"):
    return RawAcquisition(
        platform=platform,
        source_url=url,
        payload=payload,
        captured_at=datetime.now(timezone.utc),
        synthetic=synthetic,
    )


@pytest.fixture
def linkedin_payload():
    return {
        "name": "Ada Example",
        "position": "Engineering Manager at Foo",
        "current_company": {"name": "Foo"},
        "city": "London",
        "about": "Builds teams and compilers",
        "experience": [
            {"company": "Foo", "title": "Engineering Manager", "duration": "2 yrs 3 mos", "is_current": True},
            {"company": "Bar", "title": "Developer", "duration": "1 yr 6 mos"},
        ],
        "certifications": [{"title": "AWS Solutions Architect", "subtitle": "Amazon"}],
        "languages": [{"title": "French"}],
        "education": [{"school_name": "Oxford", "degree": "BSc", "field_of_study": "Maths"}],
        "connections": 500,
        "followers": 800,
        "url": "https://www.linkedin.com/in/ada",
    }


@pytest.fixture
def github_payload():
    return {
        "login": "octo",
        "name": "",
        "bio": "",
        "created_at": "2015-03-01T00:00:00Z",
        "followers": 150,
        "following": 3,
        "company": "@github",
        "html_url": "https://github.com/octo",
        "contributions": "1,234 contributions in the last year",
        "repositories": [
            {"name": "small", "language": "Go", "languages": ["Python", "Shell"], "stargazers_count": 5},
            {"name": "big", "language": "Python", "topics": ["cli"], "stargazers_count": 1200, "forks_count": 10},
        ],
    }


@pytest.fixture
def wikipedia_payload():
    return {
        "title": "Grace Hopper - Wikipedia",
        "intro": "Grace Hopper was an American computer scientist and pioneer. She was the founder of Acme Labs.",
        "description": "American computer scientist",
        "infobox": {
            "Born": "December 9, 1906",
            "Occupation": "Computer scientist, Naval officer",
            "Known for": "COBOL, Compilers",
            "Awards": "National Medal of Technology; Presidential Medal of Freedom",
            "Alma mater": "Vassar College, Yale University",
        },
        "image": "https://upload.test/hopper.jpg",
        "url": "https://en.wikipedia.org/wiki/Grace_Hopper",
    }


# --- LinkedIn ---

@pytest.mark.parametrize(
    "duration,months",
    [("2 yrs 3 mos", 27), ("1 yr", 12), ("8 mos", 8), ("3 years 1 month", 37), ("Present", 0), ("", 0)],
)
def test_parse_duration_months(duration, months):
    assert parse_duration_months(duration) == months


def test_normalize_linkedin(linkedin_payload):
    p = normalize_linkedin(linkedin_payload)
    assert p.name == "Ada Example"
    assert p.title == "Engineering Manager at Foo"
    assert p.location == "London"
    assert p.skills == ["AWS Solutions Architect", "French"]
    assert p.years_experience == 4  # 45 months
    assert p.leadership_roles == ["Engineering Manager"]
    assert p.certifications == ["AWS Solutions Architect (Amazon)"]
    assert p.achievements == ["AWS Solutions Architect"]
    assert p.companies[0] == Company(name="Foo", role="Engineering Manager at Foo", current=True)
    assert len(p.companies) == 3
    assert p.activity_metrics.connections == 500
    assert p.activity_metrics.followers == 800
    assert p.activity_metrics.posts == 0
    assert p.education[0].institution == "Oxford"
    assert p.education[0].field == "Maths"
    assert p.source_type == "linkedin"
    assert p.source_url == "https://www.linkedin.com/in/ada"


def test_normalize_linkedin_sparse():
    p = normalize_linkedin({
        "first_name": "Sam",
        "last_name": "Lee",
        "current_company_name": "Initech",
        "certifications": [{"title": "CKA"}],
        "educations_details": "State University",
    })
    assert p.name == "Sam Lee"
    assert p.title == "Professional at Initech"
    assert p.companies[0].role == "Professional"
    # no experience entries but something to show for it
    assert p.years_experience == 3
    assert p.education[0].institution == "State University"
    assert p.activity_metrics.connections == 0


def test_normalize_linkedin_empty():
    p = normalize_linkedin({})
    assert p.name == "Unknown"
    assert p.years_experience == 0
    assert p.companies == []


# --- GitHub ---

def test_normalize_github(github_payload):
    p = normalize_github(github_payload)
    assert p.name == "octo"
    assert p.title == "Developer"
    assert p.skills == ["Go", "Python", "Shell", "cli"]
    assert [proj.name for proj in p.projects] == ["big", "small"]
    assert p.projects[0].technologies == ["Python"]
    assert p.projects[0].stars == 1200
    assert p.achievements == [
        "1,205 total GitHub stars",
        "150 GitHub followers",
        "Maintains popular open source project",
    ]
    assert p.activity_metrics.repositories == 2
    assert p.activity_metrics.contributions == 1234
    assert p.activity_metrics.following == 3
    assert p.companies == [Company(name="github", role="Developer", current=True)]
    assert p.source_type == "github"
    assert p.source_url == "https://github.com/octo"


def test_skills_from_repos_caps_and_dedupes():
    repos = [{"language": f"Lang{i}", "topics": ["shared"]} for i in range(30)]
    skills = skills_from_repos(repos)
    assert len(skills) == 20
    assert skills.count("shared") == 1


def test_estimate_github_years():
    assert estimate_github_years("2015-03-01T00:00:00Z", current_year=2025) == 10
    assert estimate_github_years("2025-01-01", current_year=2025) == 1
    assert estimate_github_years(None) == 0
    assert estimate_github_years("yesterday") == 0


def test_normalize_github_tolerates_bad_types():
    p = normalize_github({"login": "x", "followers": "lots", "repositories": ["nope", {"stargazers_count": True}]})
    assert p.activity_metrics.followers == 0
    assert p.projects[0].stars == 0


# --- Wikipedia ---

def test_normalize_wikipedia(wikipedia_payload):
    p = normalize_wikipedia(wikipedia_payload)
    assert p.name == "Grace Hopper"
    assert p.title == "Computer scientist"
    assert p.skills == ["Computer scientist", "Naval officer", "COBOL", "Compilers"]
    assert p.location == "American"
    assert p.leadership_roles == ["Founder", "Pioneer"]
    assert p.achievements == ["National Medal of Technology", "Presidential Medal of Freedom"]
    assert [e.institution for e in p.education] == ["Vassar College", "Yale University"]
    assert p.companies == [Company(name="Acme Labs", role="Founder", current=True)]
    assert p.avatar == "https://upload.test/hopper.jpg"
    assert p.years_experience > 50
    assert p.source_type == "wikipedia"


def test_normalize_wikipedia_description_title():
    p = normalize_wikipedia({"title": "Someone", "description": "british engineer"})
    assert p.title == "British engineer"
    assert p.location == ""


def test_normalize_wikipedia_defaults():
    p = normalize_wikipedia({})
    assert p.name == "Unknown"
    assert p.title == "Notable Figure"
    assert p.years_experience == 10


def test_normalize_wikipedia_employer_companies():
    p = normalize_wikipedia({"title": "X", "infobox": {"Employer": "IBM, Bell Labs", "Occupation": "Engineer"}})
    assert [c.name for c in p.companies] == ["IBM", "Bell Labs"]
    assert all(c.role == "Engineer" for c in p.companies)


def test_infobox_lookup_variants():
    infobox = {"birth_date": "1900", "Known for": "", "known_for": "Things"}
    assert infobox_lookup(infobox, "Birth date") == "1900"
    assert infobox_lookup(infobox, "Known for") == "Things"
    assert infobox_lookup(infobox, "Missing") == ""


def test_nationality_from_text():
    assert nationality_from_text("", "A Canadian poet") == "Canadian"
    assert nationality_from_text("French chef", "American") == "French"
    assert nationality_from_text("a person") == ""


def test_companies_from_intro_skips_known():
    companies = [Company(name="Acme")]
    companies_from_intro("She is the CEO of Acme. He was co-founder of Widget Co.", companies)
    assert [(c.name, c.role) for c in companies] == [("Acme", ""), ("Widget Co", "Founder")]


@pytest.mark.parametrize(
    "born,intro,expected",
    [
        ("December 9, 1906", "", 96),
        ("", "A pioneer of computing", 25),
        ("", "A senior engineer", 15),
        ("", "An engineer", 10),
        ("2010", "", 1),
    ],
)
def test_estimate_wikipedia_years(born, intro, expected):
    assert estimate_wikipedia_years(born, intro, current_year=2024) == expected


# --- generic ---

def test_normalize_generic_maps_same_named_fields():
    p = normalize_generic({
        "name": "Pat",
        "skills": ["Go", 3, ""],
        "projects": [{"name": "tool", "stars": 5, "technologies": ["Go"]}, "junk"],
        "activity_metrics": {"commits": 10, "followers": "many"},
        "companies": [{"name": "Initech", "role": "Lead", "current": True}],
        "education": [{"institution": "MIT", "year": 2001}],
    })
    assert p.name == "Pat"
    assert p.title == "Developer"
    assert p.skills == ["Go"]
    assert len(p.projects) == 1
    assert p.projects[0].stars == 5
    assert p.activity_metrics.commits == 10
    assert p.activity_metrics.followers == 0
    assert p.activity_metrics.posts is None
    assert p.companies[0].current is True
    assert p.education[0].year == 2001


def test_normalize_generic_defaults():
    p = normalize_generic({})
    assert p.name == "Unknown Warrior"
    assert p.title == "Developer"
    assert p.source_type == "generic"


# --- dispatch ---

def test_normalize_synthetic_passthrough(senior_profile):
    assert normalize(_raw("linkedin", {"profile": senior_profile}, synthetic=True)) is senior_profile


def test_normalize_dispatches_and_fills_source_url():
    p = normalize(_raw("github", {"login": "octo"}, url="https://github.com/octo"))
    assert isinstance(p, CanonicalProfile)
    assert p.source_type == "github"
    assert p.source_url == "https://github.com/octo"


def test_normalize_keeps_payload_source_url(linkedin_payload):
    p = normalize(_raw("linkedin", linkedin_payload, url="https://linkedin.com/in/other"))
    assert p.source_url == "https://www.linkedin.com/in/ada"
