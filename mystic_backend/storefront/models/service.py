# storefront/models/service.py

from django.db import models


class Service(models.Model):
    """
    A purchasable reading (e.g. a psychic reading delivered by email).
    Prices are integer cents.
    """

    slug = models.SlugField(max_length=120, unique=True)
    title = models.CharField(max_length=200)

    short_desc = models.CharField(max_length=300)
    long_desc = models.TextField()

    price_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default="USD")

    delivery_hours = models.PositiveIntegerField(
        help_text="Promised delivery window after the order is placed.",
    )

    includes = models.JSONField(default=list, blank=True)
    requirements = models.JSONField(default=list, blank=True)

    # Absolute URL or a path under the frontend (e.g. /images/crystal-ball.png)
    image_url = models.CharField(max_length=500, blank=True, null=True)

    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.title} ({self.price_cents} {self.currency})"
