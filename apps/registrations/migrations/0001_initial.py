# Generated migration for fest/event registrations and teams

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('festivals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FestRegistration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='fest registration id')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], default='confirmed', max_length=10, verbose_name='status')),
                ('ticket', models.CharField(max_length=64, unique=True, verbose_name='ticket code')),
                ('qr_code', models.TextField(blank=True, help_text='PNG data URL of the ticket code', verbose_name='ticket QR code')),
                ('registered_at', models.DateTimeField(auto_now_add=True, verbose_name='registered at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='festivals.festival', verbose_name='festival')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='fest_registrations', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'fest registration',
                'verbose_name_plural': 'fest registrations',
                'ordering': ['-registered_at'],
                'constraints': [models.UniqueConstraint(fields=('user', 'festival'), name='unique_fest_registration_per_user')],
            },
        ),
        migrations.CreateModel(
            name='Team',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='team id')),
                ('team_name', models.CharField(max_length=100, verbose_name='team name')),
                ('max_size', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='maximum size')),
                ('team_code', models.CharField(max_length=16, unique=True, verbose_name='team code')),
                ('status', models.CharField(choices=[('active', 'Active'), ('full', 'Full'), ('disbanded', 'Disbanded')], default='active', max_length=10, verbose_name='status')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='teams', to='festivals.event', verbose_name='event')),
                ('leader', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='led_teams', to=settings.AUTH_USER_MODEL, verbose_name='team leader')),
            ],
            options={
                'verbose_name': 'team',
                'verbose_name_plural': 'teams',
                'ordering': ['-created_at'],
                'constraints': [models.CheckConstraint(condition=models.Q(('max_size__gte', 1)), name='team_max_size_positive')],
            },
        ),
        migrations.CreateModel(
            name='TeamMembership',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('joined_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='joined at')),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='registrations.team', verbose_name='team')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='team_memberships', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'team membership',
                'verbose_name_plural': 'team memberships',
                'ordering': ['joined_at'],
                'constraints': [models.UniqueConstraint(fields=('team', 'user'), name='unique_team_member')],
            },
        ),
        migrations.AddField(
            model_name='team',
            name='members',
            field=models.ManyToManyField(related_name='teams', through='registrations.TeamMembership', to=settings.AUTH_USER_MODEL, verbose_name='members'),
        ),
        migrations.CreateModel(
            name='EventRegistration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='event registration id')),
                ('registration_type', models.CharField(choices=[('solo', 'Solo'), ('team', 'Team')], default='solo', max_length=4, verbose_name='registration type')),
                ('team_role', models.CharField(blank=True, choices=[('leader', 'Leader'), ('member', 'Member')], max_length=6, null=True, verbose_name='team role')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], default='confirmed', max_length=10, verbose_name='status')),
                ('ticket', models.CharField(max_length=64, unique=True, verbose_name='ticket code')),
                ('qr_code', models.TextField(blank=True, help_text='PNG data URL of the ticket code', verbose_name='ticket QR code')),
                ('payment_method', models.CharField(default='card', max_length=20, verbose_name='payment method')),
                ('registered_at', models.DateTimeField(auto_now_add=True, verbose_name='registered at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='festivals.event', verbose_name='event')),
                ('fest_registration', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='event_registrations', to='registrations.festregistration', verbose_name='authorising fest registration')),
                ('team', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='registrations.team', verbose_name='team')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='event_registrations', to=settings.AUTH_USER_MODEL, verbose_name='ticket holder')),
            ],
            options={
                'verbose_name': 'event registration',
                'verbose_name_plural': 'event registrations',
                'ordering': ['-registered_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('registration_type', 'solo'), ('team__isnull', True), ('team_role__isnull', True)), models.Q(('registration_type', 'team'), ('team__isnull', False), ('team_role__isnull', False)), _connector='OR'), name='event_registration_registrant_shape'),
                    models.UniqueConstraint(condition=models.Q(('status__in', ['pending', 'confirmed'])), fields=('user', 'event'), name='unique_active_event_registration'),
                ],
            },
        ),
    ]
