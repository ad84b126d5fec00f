# storefront/management/commands/seed_storefront.py

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from storefront.models import FaqItem, Service, Testimonial

User = get_user_model()

DEFAULT_ADMIN_EMAIL = "admin@mystictxt.com"

SERVICES = [
    {
        "slug": "psychic-reading",
        "title": "Psychic Reading",
        "short_desc": "A deep, intuitive reading that reveals hidden truths about your life, relationships, and future path.",
        "long_desc": (
            "Our signature reading looks at the energies surrounding your life. Your reader tunes into "
            "your energy to uncover hidden patterns, upcoming opportunities and potential challenges, "
            "and answers your specific questions with practical guidance."
        ),
        "price_cents": 2999,
        "delivery_hours": 24,
        "image_url": "/images/crystal-ball.png",
        "includes": [
            "Detailed written reading (500+ words)",
            "Energy assessment and aura insights",
            "Past-present-future analysis",
            "Specific answers to up to 3 questions",
            "Follow-up clarification via email",
        ],
        "requirements": [
            "Your full name",
            "Date of birth (optional but recommended)",
            "Up to 3 specific questions",
            "Brief background on your situation",
        ],
    },
    {
        "slug": "telepathy-mind-reading",
        "title": "Telepathy Mind Reading",
        "short_desc": "Discover unspoken thoughts and hidden intentions through a telepathic connection.",
        "long_desc": (
            "A reading focused on another person in your life: what they think, feel and intend but "
            "have not said. Delivered as a detailed report with insights you can act on."
        ),
        "price_cents": 4999,
        "delivery_hours": 48,
        "image_url": "/images/third-eye.png",
        "includes": [
            "Deep telepathic connection session",
            "Comprehensive thought analysis report",
            "Emotional frequency mapping",
            "Relationship dynamic assessment",
            "Follow-up session (15 min)",
        ],
        "requirements": [
            "Your full name",
            "Name of the person you want to connect with",
            "Relationship to that person",
            "Specific areas of inquiry",
        ],
    },
    {
        "slug": "telepathy-mind-implants",
        "title": "Telepathy Mind Implants",
        "short_desc": "Plant positive thoughts and affirmations into the subconscious.",
        "long_desc": (
            "A guided session that reinforces confidence and positive intentions, followed by a "
            "report describing the work performed and what to expect."
        ),
        "price_cents": 7999,
        "delivery_hours": 72,
        "image_url": "/images/mind-implant.png",
        "includes": [
            "Customized session",
            "3 targeted affirmations",
            "Detailed session report",
            "30-day follow-up",
        ],
        "requirements": [
            "Your full name",
            "Date of birth",
            "Description of desired outcomes",
        ],
    },
]

TESTIMONIALS = [
    ("Sarah M.", "The reading was incredibly accurate. Everything mentioned about my relationship came true within weeks."),
    ("David R.", "I was skeptical at first, but the mind reading revealed things about my business partner that I later confirmed."),
    ("Lisa K.", "The session helped me overcome my fear of public speaking. Life-changing experience."),
]

FAQ = [
    ("How do psychic readings work?", "Readings are done remotely using the information you provide and delivered as a written report by email."),
    ("How long does delivery take?", "Psychic Readings arrive within 24 hours, Mind Readings within 48 hours and Mind Implants within 72 hours."),
    ("What payment methods do you accept?", "All major cards, Apple Pay and Google Pay via Stripe, and PayPal."),
    ("Is my information kept confidential?", "Yes. Your details and questions are never shared with third parties."),
    ("Can I get a refund?", "Contact us within 7 days of delivery. Refunds are evaluated case by case."),
    ("Do I need to provide my date of birth?", "It is optional but recommended; it helps your reader connect."),
    ("How do live chats work?", "Top up your wallet, pick a duration (5 to 60 minutes) and an advisor joins your session. The timer starts when the advisor accepts."),
]


class Command(BaseCommand):
    help = "Seed the storefront catalog, testimonials, FAQ and an admin account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default=DEFAULT_ADMIN_EMAIL)
        parser.add_argument(
            "--admin-password",
            default=os.environ.get("SEED_ADMIN_PASSWORD", ""),
            help="Defaults to $SEED_ADMIN_PASSWORD. Admin is skipped when empty.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding storefront..."))

        # -------------------------------
        # ADMIN
        # -------------------------------
        email = options["admin_email"].strip().lower()
        password = options["admin_password"]

        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(f"Admin {email} already exists")
        elif password:
            User.objects.create_user(email=email, password=password, role=User.ROLE_ADMIN)
            self.stdout.write(self.style.SUCCESS(f"Created admin {email}"))
        else:
            self.stdout.write(self.style.WARNING("No admin password given; skipping admin account"))

        # -------------------------------
        # CATALOG
        # -------------------------------
        for data in SERVICES:
            _, created = Service.objects.get_or_create(slug=data["slug"], defaults=data)
            if created:
                self.stdout.write(f"Service: {data['title']}")

        # -------------------------------
        # CONTENT (only into empty tables)
        # -------------------------------
        if not Testimonial.objects.exists():
            for name, text in TESTIMONIALS:
                Testimonial.objects.create(name=name, text=text, rating=5, active=True)

        if not FaqItem.objects.exists():
            for index, (question, answer) in enumerate(FAQ, start=1):
                FaqItem.objects.create(question=question, answer=answer, sort_order=index, active=True)

        self.stdout.write(self.style.SUCCESS("Storefront seeded successfully."))
