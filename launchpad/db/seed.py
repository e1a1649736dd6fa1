"""
Seed data for a fresh LaunchPad database.
"""
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from launchpad.db.models import Category, Comment, Startup

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("AI/ML", "Artificial Intelligence and Machine Learning"),
    ("DevTools", "Developer Tools and Infrastructure"),
    ("SaaS", "Software as a Service"),
    ("FinTech", "Financial Technology"),
    ("HealthTech", "Healthcare Technology"),
    ("CleanTech", "Clean and Sustainable Technology"),
    ("EdTech", "Education Technology"),
    ("Cloud Infrastructure", "Cloud Computing and Infrastructure"),
]

# (name, tagline, description, url, category index, upvotes)
STARTUPS = [
    (
        "TechFlow AI",
        "AI-powered workflow automation for modern teams",
        "TechFlow AI is a platform that uses artificial intelligence to automate "
        "repetitive workflows across your organization.",
        "https://techflow.ai",
        0,
        42,
    ),
    (
        "CodeBuddy",
        "Your AI pair programmer that actually understands context and intent",
        "CodeBuddy is an AI coding assistant that integrates with your IDE and "
        "understands your entire codebase for better suggestions.",
        "https://codebuddy.dev",
        0,
        28,
    ),
    (
        "ShipFast",
        "Deploy to production in under sixty seconds with zero configuration",
        "ShipFast handles building, testing, and deploying your application "
        "automatically. Just push to main and it handles the rest.",
        "https://shipfast.io",
        1,
        15,
    ),
    (
        "DataPipe",
        "Real-time data pipelines without writing any infrastructure code",
        "DataPipe lets you build data pipelines visually. Connect sources, "
        "transform data, and route it to destinations without code.",
        "https://datapipe.com",
        1,
        33,
    ),
    (
        "MetricHub",
        "Product analytics that developers actually want to use every day",
        "MetricHub provides simple and powerful product analytics with a "
        "developer-first approach and SQL-based querying interface.",
        "https://metrichub.io",
        2,
        19,
    ),
    (
        "PayBridge",
        "Cross-border payment infrastructure for emerging markets",
        "PayBridge simplifies international payments with local payment method "
        "support, automatic currency conversion, and regulatory compliance.",
        "https://paybridge.finance",
        3,
        25,
    ),
    (
        "MediSync",
        "Real-time patient data synchronization across hospital systems",
        "MediSync connects disparate hospital systems to provide a unified view of "
        "patient data, reducing errors and improving care coordination.",
        "https://medisync.health",
        4,
        31,
    ),
    (
        "GreenRoute",
        "Sustainable logistics optimization for last-mile delivery",
        "GreenRoute uses AI to optimize delivery routes, reducing carbon emissions "
        "while improving delivery speed and reducing costs for logistics companies.",
        "https://greenroute.eco",
        5,
        22,
    ),
]


def seed_database(db: Session) -> dict:
    """
    Replace all rows with the seed categories and startups.

    Args:
        db: Open session

    Returns:
        Row counts per table after seeding
    """
    logger.info("Clearing existing data...")
    db.execute(delete(Comment))
    db.execute(delete(Startup))
    db.execute(delete(Category))

    logger.info("Seeding categories...")
    categories = [Category(name=name, description=description) for name, description in CATEGORIES]
    db.add_all(categories)
    db.flush()

    logger.info("Seeding startups...")
    for name, tagline, description, url, category_index, upvotes in STARTUPS:
        db.add(Startup(
            name=name,
            tagline=tagline,
            description=description,
            url=url,
            category_id=categories[category_index].id,
            upvotes=upvotes,
        ))
    db.commit()

    counts = {
        "categories": db.execute(select(func.count()).select_from(Category)).scalar_one(),
        "startups": db.execute(select(func.count()).select_from(Startup)).scalar_one(),
    }
    logger.info(f"Seed complete: {counts}")
    return counts
