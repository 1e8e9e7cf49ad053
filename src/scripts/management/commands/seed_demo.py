"""Seed a demo organization, users of every role, and sample articles."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from access_control.policy import KNOWN_ROLES, ROLE_ADMIN, ROLE_MEMBER
from articles.models import Article, ArticleStatus, Comment
from authentication.managers import UserManager
from organizations.models import Organization

DEMO_ORGANIZATION = "Demo Publishing"
DEMO_PASSWORD = "demo-pass-123"


def demo_email(role: str) -> str:
    return f"{role}@demo.example.com"


def create_demo_organization(name: str = DEMO_ORGANIZATION) -> Organization:
    organization, _ = Organization.objects.get_or_create(name=name)
    return organization


def create_demo_users(organization: Organization, password: str = DEMO_PASSWORD) -> dict:
    """Create one member of ``organization`` per known role and return a role->User map."""
    User = get_user_model()
    users = {}
    for role in KNOWN_ROLES:
        user, _ = User.objects.get_or_create(
            email=demo_email(role),
            defaults={
                "name": role.capitalize(),
                "role": role,
                "password_hash": UserManager.hash_password(password),
            },
        )
        organization.members.add(user)
        users[role] = user
    return users


def create_demo_articles(organization: Organization, users: dict) -> list:
    """Create a published and a draft article by the admin, with one member comment."""
    author = users[ROLE_ADMIN]
    published, _ = Article.objects.get_or_create(
        title="Welcome to Demo Publishing",
        organization=organization,
        author=author,
        defaults={"content": "A published article everyone can read.", "status": ArticleStatus.PUBLISHED},
    )
    draft, _ = Article.objects.get_or_create(
        title="Upcoming release notes",
        organization=organization,
        author=author,
        defaults={"content": "Work in progress.", "status": ArticleStatus.DRAFT},
    )
    Comment.objects.get_or_create(
        article=published,
        author=users[ROLE_MEMBER],
        defaults={"content": "Looking forward to more."},
    )
    return [published, draft]


class Command(BaseCommand):
    """Management command to seed demo data for manual testing."""

    help = (
        "Seed a demo organization with one user per role and sample articles. "
        "Use --reset to clear previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo organization and demo users before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding demo data...")
        organization = create_demo_organization()
        users = create_demo_users(organization)
        create_demo_articles(organization, users)
        self.stdout.write(
            self.style.SUCCESS(
                f"Demo seed completed: organization id {organization.pk}, "
                f"users {', '.join(demo_email(role) for role in KNOWN_ROLES)} (password {DEMO_PASSWORD!r})."
            )
        )

    def _reset_seeded_data(self) -> None:
        """Remove the demo organization (articles and comments cascade) and demo users."""
        self.stdout.write("Resetting previously seeded demo data...")
        Organization.objects.filter(name=DEMO_ORGANIZATION).delete()
        get_user_model().objects.filter(email__in=[demo_email(role) for role in KNOWN_ROLES]).delete()
        self.stdout.write(self.style.WARNING("Seeded demo data cleared."))
