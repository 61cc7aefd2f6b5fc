import apps.posts.constants
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Post',
            fields=[
                ('reaction_counts', models.JSONField(default=apps.posts.constants.empty_reaction_counts)),
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('text', models.TextField(blank=True, default='', verbose_name='Text')),
                ('image', models.CharField(blank=True, max_length=500, null=True, verbose_name='Image')),
                ('comment_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='posts', to=settings.AUTH_USER_MODEL, verbose_name='Owner')),
            ],
            options={
                'verbose_name': 'Post',
                'verbose_name_plural': 'Posts',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner', '-created_at'], name='posts_post_owner_i_6c8c1e_idx')],
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('reaction_counts', models.JSONField(default=apps.posts.constants.empty_reaction_counts)),
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('text', models.TextField(blank=True, default='', verbose_name='Text')),
                ('image', models.CharField(blank=True, max_length=500, null=True, verbose_name='Image')),
                ('reply_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_comments', to=settings.AUTH_USER_MODEL, verbose_name='Owner')),
                ('post', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='comments', to='posts.post', verbose_name='Post')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='replies', to='posts.comment', verbose_name='Parent Comment')),
            ],
            options={
                'verbose_name': 'Comment',
                'verbose_name_plural': 'Comments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['post', 'parent', '-created_at'], name='posts_comme_post_id_4b1f0a_idx'),
                    models.Index(fields=['parent', 'created_at'], name='posts_comme_parent__9d2e7c_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Reaction',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('comment', 'Comment')], max_length=10, verbose_name='Target Type')),
                ('target_id', models.PositiveBigIntegerField(verbose_name='Target ID')),
                ('reaction_type', models.CharField(choices=[('love', 'Love'), ('like', 'Like'), ('funny', 'Funny'), ('horror', 'Horror')], max_length=20, verbose_name='Reaction Type')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_reactions', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Reaction',
                'verbose_name_plural': 'Reactions',
                'indexes': [
                    models.Index(fields=['target_type', 'target_id'], name='posts_react_target__1a7f3b_idx'),
                    models.Index(fields=['target_type', 'target_id', 'reaction_type'], name='posts_react_target__e52c90_idx'),
                ],
                'unique_together': {('user', 'target_type', 'target_id')},
            },
        ),
    ]
