"""
Party models for the sticker registry.

A party is either a Client or a Customer: two separate tables with the same
shape. Vehicles and policies refer to exactly one of them through an
``Owner`` value.
"""

from dataclasses import dataclass
import uuid

from django.apps import apps
from django.db import models
from django.core.validators import RegexValidator
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog
from .base import BaseModel


class PartyKind(models.TextChoices):
    CLIENT = 'client', 'Client'
    CUSTOMER = 'customer', 'Customer'

    @property
    def owner_field(self):
        """Name of the foreign key on Vehicle/Policy for this kind."""
        return self.value

    @property
    def model(self):
        return apps.get_model('core', self.label)

    @classmethod
    def parse(cls, value):
        """
        Coerce a string to a PartyKind.

        Raises:
            ValueError: if ``value`` names no party kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown party kind: {value!r}") from None


@dataclass(frozen=True)
class Owner:
    """
    The party owning a vehicle: ``Owner(PartyKind.CLIENT, id)`` or
    ``Owner(PartyKind.CUSTOMER, id)``. Exactly one kind, never both.
    """

    kind: PartyKind
    id: uuid.UUID

    @classmethod
    def client(cls, party_id):
        return cls(PartyKind.CLIENT, party_id)

    @classmethod
    def customer(cls, party_id):
        return cls(PartyKind.CUSTOMER, party_id)

    @classmethod
    def of(cls, party):
        """Owner value for a Client or Customer instance."""
        return cls(party.kind, party.pk)

    def lookup(self):
        """Queryset filter kwargs matching this owner."""
        return {f"{self.kind.owner_field}_id": self.id}

    def assign_to(self, instance):
        """Point ``instance`` (Vehicle or Policy) at this owner, clearing the other kind."""
        for kind in PartyKind:
            setattr(instance, f"{kind.owner_field}_id", self.id if kind == self.kind else None)

    @classmethod
    def read_from(cls, instance):
        """Owner referenced by a Vehicle or Policy, or None if unset."""
        for kind in PartyKind:
            party_id = getattr(instance, f"{kind.owner_field}_id")
            if party_id is not None:
                return cls(kind, party_id)
        return None

    def __str__(self):
        return f"{self.kind.label} {self.id}"


class Party(BaseModel):
    """
    Common fields for Clients and Customers.

    **Business Rules:**
    - Name is mandatory
    - Parties are never hard-deleted
    - Full history tracked
    """

    TYPE_INDIVIDUAL = 'individual'
    TYPE_COMPANY = 'company'

    TYPE_CHOICES = [
        (TYPE_INDIVIDUAL, 'Individual'),
        (TYPE_COMPANY, 'Company'),
    ]

    kind = None

    party_type = models.CharField(
        max_length=20,
        choices=TYPE_CHOICES,
        default=TYPE_INDIVIDUAL,
        help_text="Type of party: individual or company"
    )

    name = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Full name or company name"
    )

    email = models.EmailField(blank=True)

    phone = models.CharField(
        max_length=20,
        blank=True,
        validators=[
            RegexValidator(
                regex=r'^\+?1?\d{9,15}$',
                message="Phone number must be in format: '+999999999'. Up to 15 digits allowed."
            ),
        ],
    )

    address = models.TextField(blank=True)

    class Meta:
        abstract = True
        ordering = ['name']
        base_manager_name = 'all_objects'

    def __str__(self):
        return self.name

    @property
    def owner(self):
        return Owner.of(self)


class Client(Party):
    """Party served directly by the insurer."""

    kind = PartyKind.CLIENT

    history = HistoricalRecords()

    class Meta(Party.Meta):
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'


class Customer(Party):
    """Party served through an intermediary."""

    kind = PartyKind.CUSTOMER

    history = HistoricalRecords()

    class Meta(Party.Meta):
        verbose_name = 'Customer'
        verbose_name_plural = 'Customers'


# Register for audit logging
auditlog.register(Client)
auditlog.register(Customer)
