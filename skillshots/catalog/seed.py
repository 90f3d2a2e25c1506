"""
Default catalog used when the persistence layer has no snapshot yet.

Passwords are hashed at load time so the seed stays readable.
"""

from skillshots.catalog.models import (
    DocumentBlock, Group, ImageBlock, ParagraphBlock, Topic, User, UserRole, VideoBlock
)

DEFAULT_PASSWORD = "password123"

INITIAL_GROUPS = [
    Group(id="group-1", name="Product Team"),
    Group(id="group-2", name="Sales Team"),
    Group(id="group-3", name="All Employees"),
    Group(id="group-4", name="Engineering"),
    Group(id="group-5", name="Compliance"),
]

INITIAL_CATEGORIES = [
    "General",
    "Health & Safety",
    "Product Training",
    "Soft Skills",
    "Compliance",
    "Engineering",
]


def initial_users(hash_password) -> list:
    return [
        User(
            id="user-1",
            name="Alex Ray",
            email="alex@example.com",
            role=UserRole.CREATOR,
            group_ids=["group-1", "group-3"],
            password_hash=hash_password(DEFAULT_PASSWORD),
        ),
        User(
            id="user-2",
            name="Sam Doe",
            email="sam@example.com",
            role=UserRole.LEARNER,
            group_ids=["group-2", "group-3"],
            password_hash=hash_password(DEFAULT_PASSWORD),
        ),
    ]


INITIAL_TOPICS = [
    Topic(
        id="1",
        title="Workplace Safety Standards 2024",
        category="Health & Safety",
        author_id="user-1",
        read_time=5,
        image_url="https://images.unsplash.com/photo-1598528994503-68d1976a266e?q=80&w=1200",
        content=[
            ParagraphBlock(order=1, content="Safety is our number one priority. This module outlines the updated protocols for 2024, focusing on emergency exits, fire hazards, and proper ergonomic setups."),
            ImageBlock(order=2, content="https://images.unsplash.com/photo-1596524430615-b46475ddff6e?q=80&w=800", title="Always keep emergency exits clear of obstructions."),
            ParagraphBlock(order=3, content="Please review the diagram above. Obstructing these paths is a severe violation of safety code. Additionally, all employees must participate in the bi-annual fire drill."),
            VideoBlock(order=4, content="https://www.youtube.com/embed/dQw4w9WgXcQ", title="Fire Safety Demonstration"),
            ParagraphBlock(order=5, content="If you witness a safety violation, please report it immediately to your supervisor or the HR department using the anonymous tip line."),
        ],
        shared_with_groups=["group-3"],
        is_sop=True,
    ),
    Topic(
        id="2",
        title="CRM Software: Advanced Features",
        category="Product Training",
        author_id="user-2",
        read_time=12,
        image_url="https://images.unsplash.com/photo-1551288049-bebda4e38f71?q=80&w=1200",
        content=[
            ParagraphBlock(order=1, content='This session dives into the advanced analytics features of "ConnectSphere". We will cover custom report generation and automated lead scoring.'),
            ImageBlock(order=2, content="https://images.unsplash.com/photo-1460925895917-afdab827c52f?q=80&w=800", title="The new Analytics Dashboard view."),
            ParagraphBlock(order=3, content="As seen in the image, the dashboard now aggregates data in real-time. This allows for faster decision-making during sales calls."),
            DocumentBlock(order=4, content="/docs/advanced-crm-guide.pdf", title="Advanced CRM Guide.pdf"),
        ],
        shared_with_groups=["group-2"],
    ),
    Topic(
        id="3",
        title="Fusion X Product Launch Details",
        category="Product Training",
        author_id="user-1",
        read_time=8,
        image_url="https://images.unsplash.com/photo-1505740420928-5e560c06d30e?q=80&w=1200",
        content=[
            ParagraphBlock(order=1, content="The Fusion X is not just a product; it is a lifestyle revolution. Key selling points include its 48-hour battery life and AI-integrated personal assistant."),
            ParagraphBlock(order=2, content="Below is the official spec sheet that you can share with potential high-value clients."),
            DocumentBlock(order=3, content="/docs/fusion-x-spec-sheet.pdf", title="Fusion X Official Specs.pdf"),
            ImageBlock(order=4, content="https://images.unsplash.com/photo-1523275335684-37898b6baf30?q=80&w=800", title="Fusion X: Minimalist Design"),
        ],
        shared_with_groups=["group-1", "group-2"],
    ),
    Topic(
        id="4",
        title="Effective Remote Communication",
        category="Soft Skills",
        author_id="user-1",
        read_time=6,
        image_url="https://images.unsplash.com/photo-1516321318423-f06f85e504b3?q=80&w=1200",
        content=[
            ParagraphBlock(order=1, content="Remote work requires a different set of communication skills. Over-communication is better than under-communication when you are not physically present."),
            ParagraphBlock(order=2, content="Use the right tool for the job: Chat for quick questions, Video for discussions, and Email for formal records."),
            VideoBlock(order=3, content="https://www.youtube.com/embed/dQw4w9WgXcQ", title="Remote Work Etiquette"),
        ],
        shared_with_groups=["group-3"],
    ),
    Topic(
        id="5",
        title="Emergency Incident Reporting SOP",
        category="Health & Safety",
        author_id="user-1",
        read_time=3,
        image_url="https://images.unsplash.com/photo-1598528994503-68d1976a266e?q=80&w=1200",
        content=[
            ParagraphBlock(order=1, content="STEP 1: Immediate Action. Secure the area to prevent further injury."),
            ParagraphBlock(order=2, content="STEP 2: Notification. Call Emergency Services (911) if necessary. Notify the Safety Officer immediately."),
            ParagraphBlock(order=3, content="STEP 3: Documentation. Fill out form IR-2024 within 2 hours of the incident."),
        ],
        shared_with_groups=["group-3"],
        is_sop=True,
    ),
]
