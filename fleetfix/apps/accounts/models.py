"""Organizations and their members."""

from django.conf import settings
from django.db import models

from fleetfix.apps.core.models import TimeStampedMixin


class Organization(TimeStampedMixin):
    """A tenant: owns customers, equipment, templates and tasks."""

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=100, unique=True)
    logo_url = models.URLField(blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Membership(TimeStampedMixin):
    class Role(models.TextChoices):
        OWNER = "owner", "Owner"
        ADMIN = "admin", "Admin"
        MECHANIC = "mechanic", "Mechanic"
        CUSTOMER = "customer", "Customer"
        VIEWER = "viewer", "Viewer"

    # Roles allowed to move tasks through their lifecycle
    TASK_MANAGER_ROLES = frozenset({Role.OWNER, Role.ADMIN, Role.MECHANIC})

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="memberships"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships"
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.VIEWER)

    class Meta:
        ordering = ["organization__name", "user__username"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "user"], name="unique_membership_per_organization"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user} ({self.get_role_display()}) @ {self.organization}"

    @property
    def can_manage_tasks(self) -> bool:
        return self.role in self.TASK_MANAGER_ROLES
