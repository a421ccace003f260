import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Cohort',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('number', models.PositiveIntegerField(default=1)),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('default_theme', models.CharField(default='trains', max_length=50)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'ordering': ['name', 'number'],
                'constraints': [models.UniqueConstraint(fields=('name', 'number'), name='unique_cohort_name_number')],
            },
        ),
        migrations.CreateModel(
            name='Module',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('ordinal', models.PositiveIntegerField()),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('theme', models.CharField(default='trains', max_length=50)),
                ('is_released', models.BooleanField(db_index=True, default=False)),
                ('released_at', models.DateTimeField(blank=True, null=True)),
                ('cohort', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='modules', to='training.cohort')),
            ],
            options={
                'ordering': ['cohort', 'ordinal'],
                'constraints': [models.UniqueConstraint(fields=('cohort', 'ordinal'), name='unique_module_ordinal_per_cohort')],
            },
        ),
        migrations.CreateModel(
            name='Assignment',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('ordinal', models.PositiveIntegerField()),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('deadline', models.DateTimeField()),
                ('points', models.PositiveIntegerField(default=100, validators=[django.core.validators.MinValueValidator(0)])),
                ('bonus_points', models.PositiveIntegerField(default=50, validators=[django.core.validators.MinValueValidator(0)])),
                ('is_released', models.BooleanField(db_index=True, default=False)),
                ('released_at', models.DateTimeField(blank=True, null=True)),
                ('cohort', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assignments', to='training.cohort')),
                ('module', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assignments', to='training.module')),
            ],
            options={
                'ordering': ['cohort', 'ordinal'],
                'indexes': [models.Index(fields=['cohort', 'is_released'], name='training_as_cohort__5e1c2a_idx')],
                'constraints': [models.UniqueConstraint(fields=('cohort', 'ordinal'), name='unique_assignment_ordinal_per_cohort')],
            },
        ),
        migrations.CreateModel(
            name='ContentSection',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('material', models.TextField(blank=True)),
                ('order_index', models.PositiveIntegerField()),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sections', to='training.assignment')),
            ],
            options={
                'ordering': ['order_index'],
                'constraints': [models.UniqueConstraint(fields=('assignment', 'order_index'), name='unique_section_order_per_assignment')],
            },
        ),
        migrations.CreateModel(
            name='MiniQuestion',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('prompt', models.TextField()),
                ('description', models.TextField(blank=True)),
                ('resource_url', models.URLField(blank=True)),
                ('order_index', models.PositiveIntegerField()),
                ('release_date', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('is_released', models.BooleanField(db_index=True, default=False)),
                ('actual_release_date', models.DateTimeField(blank=True, null=True)),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mini_questions', to='training.contentsection')),
            ],
            options={
                'ordering': ['order_index'],
                'indexes': [models.Index(fields=['is_released', 'release_date'], name='training_mi_is_rele_8b7d41_idx')],
                'constraints': [models.UniqueConstraint(fields=('section', 'order_index'), name='unique_mini_question_order_per_section')],
            },
        ),
        migrations.CreateModel(
            name='CohortMembership',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('ENROLLED', 'Enrolled'), ('GRADUATED', 'Graduated'), ('REMOVED', 'Removed'), ('SUSPENDED', 'Suspended')], db_index=True, default='ENROLLED', max_length=16)),
                ('current_step', models.PositiveIntegerField(default=0)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('status_changed_at', models.DateTimeField(blank=True, null=True)),
                ('graduated_at', models.DateTimeField(blank=True, null=True)),
                ('cohort', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='memberships', to='training.cohort')),
                ('learner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cohort_memberships', to=settings.AUTH_USER_MODEL)),
                ('status_changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('graduated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-current_step', 'joined_at'],
                'indexes': [models.Index(fields=['cohort', 'status'], name='training_co_cohort__a4f0d9_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('cohort', 'learner'), name='unique_cohort_membership'),
                    models.UniqueConstraint(condition=models.Q(('status', 'ENROLLED')), fields=('learner',), name='single_active_enrollment_per_learner'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Answer',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('content', models.TextField()),
                ('notes', models.TextField(blank=True)),
                ('submitted_at', models.DateTimeField(db_index=True)),
                ('status', models.CharField(choices=[('PENDING', 'Pending review'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')], db_index=True, default='PENDING', max_length=16)),
                ('grade', models.CharField(blank=True, choices=[('GOLD', 'Gold'), ('SILVER', 'Silver'), ('COPPER', 'Copper'), ('NEEDS_RESUBMISSION', 'Needs resubmission')], max_length=24, null=True)),
                ('grade_points', models.PositiveIntegerField(blank=True, null=True)),
                ('feedback', models.TextField(blank=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('resubmission_requested', models.BooleanField(default=False)),
                ('resubmission_approved', models.BooleanField(blank=True, null=True)),
                ('resubmission_requested_at', models.DateTimeField(blank=True, null=True)),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='answers', to='training.assignment')),
                ('cohort', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='answers', to='training.cohort')),
                ('learner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_answers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-submitted_at'],
                'get_latest_by': 'submitted_at',
                'indexes': [
                    models.Index(fields=['learner', 'assignment', 'submitted_at'], name='training_an_learner_3c9e7b_idx'),
                    models.Index(fields=['cohort', 'status'], name='training_an_cohort__f21d60_idx'),
                ],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'PENDING')), fields=('learner', 'assignment'), name='single_open_answer_per_learner_assignment')],
            },
        ),
        migrations.CreateModel(
            name='MiniAnswer',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('link_url', models.URLField(max_length=1000)),
                ('notes', models.TextField(blank=True)),
                ('submitted_at', models.DateTimeField()),
                ('resubmission_requested', models.BooleanField(default=False)),
                ('resubmission_approved', models.BooleanField(blank=True, null=True)),
                ('resubmission_requested_at', models.DateTimeField(blank=True, null=True)),
                ('cohort', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='mini_answers', to='training.cohort')),
                ('learner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mini_answers', to=settings.AUTH_USER_MODEL)),
                ('mini_question', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='answers', to='training.miniquestion')),
                ('resubmission_decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('resubmission_requested_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-submitted_at'],
                'constraints': [models.UniqueConstraint(fields=('learner', 'mini_question', 'cohort'), name='unique_mini_answer_per_learner_question_cohort')],
            },
        ),
    ]
