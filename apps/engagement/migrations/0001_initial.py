# Generated migration for wishlist and recently viewed festivals

from django.conf import settings
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
            name='Wishlist',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='wishlist item id')),
                ('added_at', models.DateTimeField(auto_now_add=True, verbose_name='added at')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wishlisted_by', to='festivals.festival', verbose_name='festival')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wishlist', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'wishlist item',
                'verbose_name_plural': 'wishlist items',
                'ordering': ['-added_at'],
                'constraints': [models.UniqueConstraint(fields=('user', 'festival'), name='unique_wishlist_festival')],
            },
        ),
        migrations.CreateModel(
            name='RecentlyViewed',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='view id')),
                ('viewed_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='viewed at')),
                ('view_count', models.PositiveIntegerField(default=1, verbose_name='view count')),
                ('festival', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='viewed_by', to='festivals.festival', verbose_name='festival')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recently_viewed', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'recently viewed festival',
                'verbose_name_plural': 'recently viewed festivals',
                'ordering': ['-viewed_at'],
                'indexes': [models.Index(fields=['user', '-viewed_at'], name='recently_viewed_user_recent')],
                'constraints': [models.UniqueConstraint(fields=('user', 'festival'), name='unique_recently_viewed_festival')],
            },
        ),
    ]
