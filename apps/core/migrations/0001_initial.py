# Generated manually for the initial sticker registry schema

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
import uuid


def audit_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
        ('updated_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ('is_active', models.BooleanField(db_index=True, default=True)),
        ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
    ]


def audit_user_fields(prefix):
    return [
        ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'{prefix}_created_set', to=settings.AUTH_USER_MODEL)),
        ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'{prefix}_updated_set', to=settings.AUTH_USER_MODEL)),
    ]


def historical_fields():
    """Fields simple_history adds to every historical model."""
    return [
        ('id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False)),
        ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
        ('updated_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ('is_active', models.BooleanField(db_index=True, default=True)),
        ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
        ('history_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('history_date', models.DateTimeField(db_index=True)),
        ('history_change_reason', models.CharField(max_length=100, null=True)),
        ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
        ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('updated_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


def historical_options(name):
    return {
        'verbose_name': f'historical {name}',
        'verbose_name_plural': f'historical {name}s',
        'ordering': ('-history_date', '-history_id'),
        'get_latest_by': ('history_date', 'history_id'),
    }


def history_fk(to):
    return models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=to)


def party_fields():
    return [
        ('party_type', models.CharField(choices=[('individual', 'Individual'), ('company', 'Company')], default='individual', help_text='Type of party: individual or company', max_length=20)),
        ('name', models.CharField(db_index=True, help_text='Full name or company name', max_length=255)),
        ('email', models.EmailField(blank=True, max_length=254)),
        ('phone', models.CharField(blank=True, max_length=20, validators=[django.core.validators.RegexValidator(message="Phone number must be in format: '+999999999'. Up to 15 digits allowed.", regex='^\\+?1?\\d{9,15}$')])),
        ('address', models.TextField(blank=True)),
    ]


def vehicle_fields():
    return [
        ('registration_no', models.CharField(db_index=True, help_text='Vehicle registration/license plate number', max_length=50)),
        ('make', models.CharField(help_text='Vehicle manufacturer (e.g., Toyota, Honda)', max_length=100)),
        ('model', models.CharField(help_text='Vehicle model', max_length=100)),
        ('year', models.PositiveIntegerField(blank=True, help_text='Year of manufacture', null=True)),
        ('chassis_number', models.CharField(blank=True, db_index=True, max_length=100)),
        ('engine_number', models.CharField(blank=True, max_length=100)),
    ]


def policy_fields():
    return [
        ('policy_no', models.CharField(db_index=True, help_text='Policy number', max_length=100)),
        ('valid_from', models.DateField(help_text='Cover start date')),
        ('valid_to', models.DateField(help_text='Cover end date')),
        ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACTIVE', 'Active'), ('EXPIRED', 'Expired'), ('CANCELLED', 'Cancelled')], db_index=True, default='PENDING', max_length=20)),
    ]


STICKER_STATUS_CHOICES = [('AVAILABLE', 'Available'), ('ISSUED', 'Issued'), ('VOIDED', 'Voided'), ('EXPIRED', 'Expired')]


def reference_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('name', models.CharField(max_length=100)),
        ('description', models.TextField(blank=True)),
        ('is_active', models.BooleanField(db_index=True, default=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # Reference catalog
        migrations.CreateModel(
            name='BodyType',
            fields=reference_fields(),
            options={
                'verbose_name': 'Body Type',
                'verbose_name_plural': 'Body Types',
                'indexes': [models.Index(fields=['is_active', 'name'], name='core_bodyty_is_acti_5b1c2e_idx')],
            },
        ),
        migrations.CreateModel(
            name='VehicleType',
            fields=reference_fields(),
            options={
                'verbose_name': 'Vehicle Type',
                'verbose_name_plural': 'Vehicle Types',
                'indexes': [models.Index(fields=['is_active', 'name'], name='core_vehicl_is_acti_8e2f41_idx')],
            },
        ),
        migrations.CreateModel(
            name='StickerStock',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('serial_number', models.CharField(max_length=100, unique=True)),
                ('received_at', models.DateTimeField(blank=True, null=True)),
                ('issued_at', models.DateTimeField(blank=True, null=True)),
                ('valid_from', models.DateField(blank=True, null=True)),
                ('valid_to', models.DateField(blank=True, null=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'Sticker Stock',
                'verbose_name_plural': 'Sticker Stock',
                'ordering': ['serial_number'],
            },
        ),

        # Parties
        migrations.CreateModel(
            name='Client',
            fields=audit_fields() + party_fields() + audit_user_fields('client'),
            options={
                'verbose_name': 'Client',
                'verbose_name_plural': 'Clients',
                'ordering': ['name'],
                'abstract': False,
                'base_manager_name': 'all_objects',
            },
        ),
        migrations.CreateModel(
            name='Customer',
            fields=audit_fields() + party_fields() + audit_user_fields('customer'),
            options={
                'verbose_name': 'Customer',
                'verbose_name_plural': 'Customers',
                'ordering': ['name'],
                'abstract': False,
                'base_manager_name': 'all_objects',
            },
        ),

        # Vehicles
        migrations.CreateModel(
            name='Vehicle',
            fields=audit_fields() + vehicle_fields() + [
                ('body_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='core.bodytype')),
                ('vehicle_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='core.vehicletype')),
                ('client', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='core.client')),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='core.customer')),
            ] + audit_user_fields('vehicle'),
            options={
                'verbose_name': 'Vehicle',
                'verbose_name_plural': 'Vehicles',
                'ordering': ['-created_at'],
                'base_manager_name': 'all_objects',
                'indexes': [
                    models.Index(fields=['client', 'is_active'], name='core_vehicl_client__3d7a90_idx'),
                    models.Index(fields=['customer', 'is_active'], name='core_vehicl_custome_a41c5b_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            (models.Q(client__isnull=False) & models.Q(customer__isnull=True)) |
                            (models.Q(client__isnull=True) & models.Q(customer__isnull=False))
                        ),
                        name='vehicle_has_exactly_one_owner',
                    ),
                    models.UniqueConstraint(condition=models.Q(is_active=True), fields=('registration_no',), name='unique_active_registration_no'),
                ],
            },
        ),

        # Policies
        migrations.CreateModel(
            name='Policy',
            fields=audit_fields() + policy_fields() + [
                ('vehicle', models.ForeignKey(help_text='Vehicle covered by this policy', on_delete=django.db.models.deletion.PROTECT, related_name='policies', to='core.vehicle')),
                ('client', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='policies', to='core.client')),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='policies', to='core.customer')),
            ] + audit_user_fields('policy'),
            options={
                'verbose_name': 'Policy',
                'verbose_name_plural': 'Policies',
                'ordering': ['-created_at'],
                'base_manager_name': 'all_objects',
                'indexes': [
                    models.Index(fields=['vehicle', 'status'], name='core_policy_vehicle_6f0d12_idx'),
                    models.Index(fields=['client'], name='core_policy_client__0b9e77_idx'),
                    models.Index(fields=['customer'], name='core_policy_custome_c52a18_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(valid_to__gt=models.F('valid_from')), name='policy_valid_to_after_valid_from'),
                    models.CheckConstraint(
                        condition=(
                            (models.Q(client__isnull=False) & models.Q(customer__isnull=True)) |
                            (models.Q(client__isnull=True) & models.Q(customer__isnull=False))
                        ),
                        name='policy_has_exactly_one_party',
                    ),
                    models.UniqueConstraint(condition=models.Q(is_active=True), fields=('policy_no',), name='unique_active_policy_no'),
                ],
            },
        ),

        # Stickers
        migrations.CreateModel(
            name='Sticker',
            fields=audit_fields() + [
                ('sticker_no', models.CharField(help_text='Printed sticker number', max_length=100, unique=True)),
                ('status', models.CharField(choices=STICKER_STATUS_CHOICES, db_index=True, default='ISSUED', max_length=20)),
                ('policy', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stickers', to='core.policy')),
                ('stock', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='stickers', to='core.stickerstock')),
            ] + audit_user_fields('sticker'),
            options={
                'verbose_name': 'Sticker',
                'verbose_name_plural': 'Stickers',
                'ordering': ['-created_at'],
                'base_manager_name': 'all_objects',
                'indexes': [models.Index(fields=['is_active', 'created_at'], name='core_sticke_is_acti_9c3b07_idx')],
            },
        ),

        # History tables
        migrations.CreateModel(
            name='HistoricalClient',
            fields=historical_fields() + party_fields(),
            options=historical_options('client'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalCustomer',
            fields=historical_fields() + party_fields(),
            options=historical_options('customer'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalVehicle',
            fields=historical_fields() + vehicle_fields() + [
                ('body_type', history_fk('core.bodytype')),
                ('vehicle_type', history_fk('core.vehicletype')),
                ('client', history_fk('core.client')),
                ('customer', history_fk('core.customer')),
            ],
            options=historical_options('vehicle'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalPolicy',
            fields=historical_fields() + policy_fields() + [
                ('vehicle', history_fk('core.vehicle')),
                ('client', history_fk('core.client')),
                ('customer', history_fk('core.customer')),
            ],
            options=historical_options('policy'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalSticker',
            fields=historical_fields() + [
                ('sticker_no', models.CharField(db_index=True, help_text='Printed sticker number', max_length=100)),
                ('status', models.CharField(choices=STICKER_STATUS_CHOICES, db_index=True, default='ISSUED', max_length=20)),
                ('policy', history_fk('core.policy')),
                ('stock', history_fk('core.stickerstock')),
            ],
            options=historical_options('sticker'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
