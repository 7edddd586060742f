# Generated migration for festivals, events and festival roles

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Festival',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='festival id')),
                ('name', models.CharField(max_length=200, verbose_name='festival name')),
                ('festival_type', models.CharField(choices=[('cultural', 'Cultural'), ('technical', 'Technical'), ('sports', 'Sports'), ('management', 'Management'), ('other', 'Other')], default='other', max_length=20, verbose_name='festival type')),
                ('visibility', models.CharField(choices=[('public', 'Public'), ('private', 'Private')], default='public', max_length=10, verbose_name='visibility')),
                ('state', models.CharField(max_length=100, verbose_name='state')),
                ('city', models.CharField(max_length=100, verbose_name='city')),
                ('venue', models.CharField(max_length=200, verbose_name='venue')),
                ('college', models.CharField(blank=True, max_length=200, null=True, verbose_name='college')),
                ('start_date', models.DateTimeField(verbose_name='start date')),
                ('end_date', models.DateTimeField(verbose_name='end date')),
                ('mode', models.CharField(choices=[('online', 'Online'), ('offline', 'Offline'), ('hybrid', 'Hybrid')], default='offline', max_length=10, verbose_name='festival mode')),
                ('about', models.TextField(blank=True, null=True, verbose_name='about')),
                ('contact', models.CharField(blank=True, max_length=20, null=True, verbose_name='contact number')),
                ('email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='contact email')),
                ('is_registration_open', models.BooleanField(default=True, verbose_name='registration open')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_festivals', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
            ],
            options={
                'verbose_name': 'festival',
                'verbose_name_plural': 'festivals',
                'ordering': ['-start_date'],
                'constraints': [models.CheckConstraint(condition=models.Q(('end_date__gte', models.F('start_date'))), name='festival_end_after_start')],
            },
        ),
        migrations.CreateModel(
            name='FestivalTicket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='ticket name')),
                ('price', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)], verbose_name='price')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tickets', to='festivals.festival', verbose_name='festival')),
            ],
            options={
                'verbose_name': 'festival ticket',
                'verbose_name_plural': 'festival tickets',
            },
        ),
        migrations.CreateModel(
            name='FestivalSponsor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='sponsor name')),
                ('logo', models.URLField(blank=True, null=True, verbose_name='logo url')),
                ('website', models.URLField(blank=True, null=True, verbose_name='website')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sponsors', to='festivals.festival', verbose_name='festival')),
            ],
            options={
                'verbose_name': 'festival sponsor',
                'verbose_name_plural': 'festival sponsors',
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='event id')),
                ('name', models.CharField(max_length=200, verbose_name='event name')),
                ('event_type', models.CharField(blank=True, choices=[('competition', 'Competition'), ('workshop', 'Workshop'), ('talk', 'Talk'), ('performance', 'Performance'), ('hackathon', 'Hackathon'), ('other', 'Other')], max_length=20, null=True, verbose_name='event type')),
                ('visibility', models.CharField(blank=True, choices=[('public', 'Public'), ('private', 'Private')], max_length=10, null=True, verbose_name='visibility')),
                ('mode', models.CharField(blank=True, choices=[('online', 'Online'), ('offline', 'Offline'), ('hybrid', 'Hybrid')], max_length=10, null=True, verbose_name='event mode')),
                ('location', models.CharField(blank=True, max_length=200, null=True, verbose_name='location')),
                ('venue', models.CharField(blank=True, max_length=200, null=True, verbose_name='venue')),
                ('start_date', models.DateTimeField(blank=True, null=True, verbose_name='start date')),
                ('end_date', models.DateTimeField(blank=True, null=True, verbose_name='end date')),
                ('rulebook_link', models.URLField(blank=True, null=True, verbose_name='rulebook link')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('image_urls', models.JSONField(blank=True, default=list, verbose_name='image urls')),
                ('is_team_event', models.BooleanField(default=False, verbose_name='team event')),
                ('team_size', models.PositiveIntegerField(blank=True, help_text='Maximum members per team, required for team events', null=True, validators=[django.core.validators.MinValueValidator(1)], verbose_name='team size')),
                ('capacity', models.PositiveIntegerField(blank=True, help_text='Maximum active solo registrations, leave empty for unlimited', null=True, verbose_name='capacity')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published'), ('archived', 'Archived')], default='draft', max_length=10, verbose_name='status')),
                ('published_at', models.DateTimeField(blank=True, null=True, verbose_name='published at')),
                ('draft_version', models.PositiveIntegerField(default=1, verbose_name='draft version')),
                ('last_saved_as_draft', models.DateTimeField(blank=True, null=True, verbose_name='last saved as draft')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_events', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='festivals.festival', verbose_name='festival')),
                ('published_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='published_events', to=settings.AUTH_USER_MODEL, verbose_name='published by')),
            ],
            options={
                'verbose_name': 'event',
                'verbose_name_plural': 'events',
                'ordering': ['start_date', 'name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('is_team_event', False), models.Q(('team_size__isnull', False), ('team_size__gte', 1)), _connector='OR'), name='event_team_size_required_for_team_events'),
                    models.CheckConstraint(condition=models.Q(('end_date__isnull', True), ('start_date__isnull', True), ('end_date__gte', models.F('start_date')), _connector='OR'), name='event_end_after_start'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EventReward',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rank', models.PositiveIntegerField(verbose_name='rank')),
                ('cash', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='cash prize')),
                ('coupon', models.CharField(blank=True, max_length=200, null=True, verbose_name='coupon')),
                ('goodies', models.CharField(blank=True, max_length=200, null=True, verbose_name='goodies')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rewards', to='festivals.event', verbose_name='event')),
            ],
            options={
                'verbose_name': 'event reward',
                'verbose_name_plural': 'event rewards',
                'ordering': ['rank'],
            },
        ),
        migrations.CreateModel(
            name='EventTicket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='ticket name')),
                ('fee_type', models.CharField(choices=[('free', 'Free'), ('paid', 'Paid')], default='free', max_length=4, verbose_name='fee type')),
                ('price', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)], verbose_name='price')),
                ('available_from', models.DateTimeField(blank=True, null=True, verbose_name='available from')),
                ('available_till', models.DateTimeField(blank=True, null=True, verbose_name='available till')),
                ('max_quantity', models.PositiveIntegerField(blank=True, null=True, verbose_name='maximum quantity')),
                ('current_quantity', models.PositiveIntegerField(default=0, verbose_name='current quantity')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tickets', to='festivals.event', verbose_name='event')),
            ],
            options={
                'verbose_name': 'event ticket',
                'verbose_name_plural': 'event tickets',
            },
        ),
        migrations.CreateModel(
            name='EventSponsor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='sponsor name')),
                ('logo', models.URLField(blank=True, null=True, verbose_name='logo url')),
                ('website', models.URLField(blank=True, null=True, verbose_name='website')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sponsors', to='festivals.event', verbose_name='event')),
            ],
            options={
                'verbose_name': 'event sponsor',
                'verbose_name_plural': 'event sponsors',
            },
        ),
        migrations.CreateModel(
            name='EventJudge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='judge name')),
                ('photo', models.URLField(blank=True, null=True, verbose_name='photo url')),
                ('bio', models.TextField(blank=True, null=True, verbose_name='bio')),
                ('mobile', models.CharField(blank=True, max_length=20, null=True, verbose_name='mobile')),
                ('email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='email')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='judges', to='festivals.event', verbose_name='event')),
            ],
            options={
                'verbose_name': 'event judge',
                'verbose_name_plural': 'event judges',
            },
        ),
        migrations.CreateModel(
            name='FestivalUserRole',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='role assignment id')),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('festival_head', 'Festival Head'), ('event_manager', 'Event Manager'), ('event_coordinator', 'Event Coordinator'), ('event_volunteer', 'Event Volunteer')], max_length=20, verbose_name='festival role')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('assigned_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='assigned at')),
                ('expires_at', models.DateTimeField(blank=True, null=True, verbose_name='expires at')),
                ('assigned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_festival_roles', to=settings.AUTH_USER_MODEL, verbose_name='assigned by')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_roles', to='festivals.festival', verbose_name='festival')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='festival_roles', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'festival user role',
                'verbose_name_plural': 'festival user roles',
                'ordering': ['festival', 'role'],
                'constraints': [models.UniqueConstraint(fields=('user', 'festival'), name='unique_festival_role_per_user')],
            },
        ),
    ]
