"""Demo profiles substituted when a real acquisition fails."""

import copy
import dataclasses
import logging
import random

from devduel.models import ActivityMetrics, CanonicalProfile, Company, Education, Platform, Project

logger = logging.getLogger(__name__)

SYNTHETIC_PROFILES: tuple[CanonicalProfile, ...] = (
    CanonicalProfile(
        name="Alex Chen",
        title="Senior Software Engineer",
        skills=["TypeScript", "React", "Node.js", "AWS", "PostgreSQL", "Docker", "Kubernetes"],
        years_experience=8,
        leadership_roles=["Tech Lead", "Mentor"],
        projects=[
            Project(name="CloudScale", description="Distributed microservices platform", stars=450, forks=89),
            Project(name="ReactFlow", description="Advanced state management library", stars=1200, forks=230),
        ],
        achievements=["AWS Certified Solutions Architect", "Google Cloud Professional"],
        activity_metrics=ActivityMetrics(commits=2500, contributions=890, followers=1200, repositories=45),
        certifications=["AWS Solutions Architect", "Kubernetes Administrator"],
        companies=[
            Company(name="TechCorp", role="Senior Engineer", current=True),
            Company(name="StartupXYZ", role="Full Stack Developer", current=False),
        ],
        education=[Education(institution="MIT", degree="BS", field="Computer Science")],
        summary="Passionate about building scalable systems",
    ),
    CanonicalProfile(
        name="Sarah Kim",
        title="Staff Engineer",
        skills=["Python", "Machine Learning", "TensorFlow", "PyTorch", "Rust", "Go", "System Design"],
        years_experience=12,
        leadership_roles=["Staff Engineer", "Architecture Lead", "Team Lead"],
        projects=[
            Project(name="MLPipeline", description="End-to-end ML infrastructure", stars=3400, forks=567),
            Project(name="FastPredict", description="Real-time inference engine", stars=890, forks=145),
        ],
        achievements=["Patent holder", "Conference Speaker", "Open Source Maintainer"],
        activity_metrics=ActivityMetrics(commits=5000, contributions=2100, followers=5600, repositories=78),
        certifications=["Google ML Engineer", "Deep Learning Specialization"],
        companies=[
            Company(name="Google", role="Staff Engineer", current=True),
            Company(name="Meta", role="Senior Engineer", current=False),
        ],
        education=[Education(institution="Stanford", degree="PhD", field="Machine Learning")],
        summary="Building the future of AI infrastructure",
    ),
    CanonicalProfile(
        name="Marcus Johnson",
        title="Engineering Manager",
        skills=["Java", "Spring Boot", "Microservices", "Leadership", "Architecture", "DevOps"],
        years_experience=15,
        leadership_roles=["Engineering Manager", "Director", "VP Engineering"],
        projects=[
            Project(name="EnterpriseCore", description="Enterprise integration platform", stars=780, forks=234),
        ],
        achievements=["Built teams from 5 to 50 engineers", "IPO experience"],
        activity_metrics=ActivityMetrics(commits=1200, followers=3400, connections=8900),
        certifications=["PMP", "Agile Coach"],
        companies=[
            Company(name="Stripe", role="Engineering Manager", current=True),
            Company(name="Amazon", role="Senior Manager", current=False),
        ],
        education=[Education(institution="Berkeley", degree="MS", field="Computer Science")],
        summary="Building high-performing engineering teams",
    ),
)


def pick_synthetic_index(used: set[int], rng: random.Random, catalog_size: int = len(SYNTHETIC_PROFILES)) -> int:
    """Pick a catalog index, skipping ones already used while unused ones remain.

    Marks the chosen index as used.
    """
    index = rng.randrange(catalog_size)
    while index in used and len(used) < catalog_size:
        index = (index + 1) % catalog_size
    used.add(index)
    logger.debug("Synthetic profile %d selected (used: %s)", index, sorted(used))
    return index


def synthetic_profile(index: int, url: str, platform: Platform) -> CanonicalProfile:
    """Deep copy of a catalog entry re-pointed at the requested URL."""
    template = SYNTHETIC_PROFILES[index]
    return dataclasses.replace(
        copy.deepcopy(template),
        source_url=url,
        source_type=platform,
    )
