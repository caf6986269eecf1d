"""Demo fixture: one project with a few backers, created through the normal
engine operations so every invariant and notification applies."""

import logging

from src.core.domain.project import Project
from src.engine.engine import TokenomicsEngine

logger = logging.getLogger(__name__)

DEMO_PROJECT_NAME = "Aurora AI Vision"
DEMO_FOUNDER_ID = "founder_demo"

DEMO_BACKERS: tuple[tuple[str, float], ...] = (
    ("u_alice", 50.0),
    ("u_bob", 120.0),
    ("u_cara", 200.0),
)


def seed_demo(engine: TokenomicsEngine) -> tuple[Project, bool]:
    """Create the demo project unless it already exists.

    Returns:
        (project, created): created is False when the demo was already seeded
    """
    for project in engine.list_projects():
        if project.name == DEMO_PROJECT_NAME:
            return project, False

    project = engine.create_project(
        DEMO_FOUNDER_ID,
        name=DEMO_PROJECT_NAME,
        summary="Self-hosted multimodal vision stack for robotics with on-device inference.",
        plan="MVP -> Pilots -> Open-source SDK -> Enterprise",
        video_url="https://example.com/video",
        resumes_url="https://example.com/team",
    )
    for user_id, amount in DEMO_BACKERS:
        engine.buy(project.id, user_id, amount)

    project = engine.get_project(project.id)
    logger.info(
        "demo seeded (supply=%d reserve=%.2f)", project.supply, project.reserve,
        extra={"project_id": project.id},
    )
    return project, True
