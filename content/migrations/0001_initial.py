# Initial schema for the blog, hero banners and inquiries

from django.db import migrations, models
import django.db.models.deletion


def seo_fields():
    return [
        ('seo_title', models.CharField(blank=True, max_length=255)),
        ('seo_description', models.TextField(blank=True)),
        ('seo_keywords', models.CharField(blank=True, help_text='Comma-separated keywords', max_length=500)),
        ('canonical_url', models.URLField(blank=True, max_length=500)),
        ('robots_index', models.BooleanField(default=True)),
        ('robots_follow', models.BooleanField(default=True)),
        ('og_title', models.CharField(blank=True, max_length=255)),
        ('og_description', models.TextField(blank=True)),
        ('og_image', models.URLField(blank=True, max_length=500)),
        ('twitter_title', models.CharField(blank=True, max_length=255)),
        ('twitter_description', models.TextField(blank=True)),
        ('twitter_image', models.URLField(blank=True, max_length=500)),
        ('json_ld', models.JSONField(blank=True, null=True)),
        ('seo_score', models.PositiveSmallIntegerField(default=0)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='BlogCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('slug', models.SlugField(max_length=120, unique=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('color', models.CharField(default='#6366f1', max_length=20)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'blog categories',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Blog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
            ] + seo_fields() + [
                ('title', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=255, unique=True)),
                ('excerpt', models.TextField(blank=True, null=True)),
                ('content', models.TextField()),
                ('featured_image', models.URLField(blank=True, max_length=500, null=True)),
                ('featured_image_alt', models.CharField(blank=True, default='', max_length=255)),
                ('author_name', models.CharField(default='Admin', max_length=100)),
                ('author_image', models.URLField(blank=True, max_length=500, null=True)),
                ('author_bio', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PUBLISHED', 'Published'), ('SCHEDULED', 'Scheduled'), ('ARCHIVED', 'Archived')], db_index=True, default='DRAFT', max_length=20)),
                ('is_featured', models.BooleanField(default=False)),
                ('allow_comments', models.BooleanField(default=True)),
                ('schema_type', models.CharField(default='Article', max_length=50)),
                ('internal_notes', models.TextField(blank=True, null=True)),
                ('reading_time', models.PositiveIntegerField(default=0)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('published_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='blogs', to='content.blogcategory')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', '-published_at'], name='content_blo_status_e92d17_idx')],
            },
        ),
        migrations.CreateModel(
            name='BlogTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('slug', models.SlugField(max_length=120)),
                ('blog', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tags', to='content.blog')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='HeroBanner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('location', models.CharField(choices=[('HOME', 'Home page'), ('PREBUILT_PC', 'Prebuilt PC page')], db_index=True, max_length=20)),
                ('title', models.CharField(max_length=255)),
                ('subtitle', models.CharField(blank=True, max_length=255, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('mobile_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('button_text', models.CharField(blank=True, max_length=100, null=True)),
                ('button_link', models.CharField(blank=True, max_length=500, null=True)),
                ('text_color', models.CharField(default='#ffffff', max_length=30)),
                ('overlay_color', models.CharField(default='rgba(0,0,0,0.5)', max_length=50)),
                ('text_align', models.CharField(default='left', max_length=10)),
                ('badge_text', models.CharField(blank=True, max_length=50, null=True)),
                ('badge_color', models.CharField(default='#ef4444', max_length=30)),
                ('start_date', models.DateTimeField(blank=True, null=True)),
                ('end_date', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['sort_order', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Inquiry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('MANUAL', 'Manual'), ('MODAL_WEB', 'Website popup'), ('CHAT_WEB', 'Website chat'), ('AD_WEB', 'Ad landing page'), ('SOCIAL_MEDIA', 'Social media'), ('PHONE_CALL', 'Phone call'), ('WALK_IN', 'Walk-in')], db_index=True, default='MANUAL', max_length=20)),
                ('name', models.CharField(max_length=150)),
                ('mobile', models.CharField(max_length=15)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('requirement', models.TextField(blank=True, null=True)),
                ('budget', models.CharField(blank=True, max_length=100, null=True)),
                ('note', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('NEW', 'New'), ('CONTACTED', 'Contacted'), ('INTERESTED', 'Interested'), ('FOLLOW_UP', 'Follow up'), ('CONVERTED', 'Converted'), ('NOT_INTERESTED', 'Not interested'), ('CANCELLED', 'Cancelled')], db_index=True, default='NEW', max_length=20)),
                ('source', models.CharField(blank=True, max_length=255, null=True)),
                ('utm_source', models.CharField(blank=True, max_length=255, null=True)),
                ('utm_medium', models.CharField(blank=True, max_length=255, null=True)),
                ('utm_campaign', models.CharField(blank=True, max_length=255, null=True)),
                ('follow_up_date', models.DateTimeField(blank=True, null=True)),
                ('last_contacted_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_to', models.CharField(blank=True, max_length=150, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'inquiries',
                'ordering': ['-created_at'],
            },
        ),
    ]
