from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Goal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('tracking_method', models.CharField(choices=[('input_numbers', 'Input Numbers'), ('track_days_completed', 'Track Days Completed'), ('input_list', 'Input List')], max_length=30)),
                ('goal_type', models.CharField(blank=True, choices=[('list_tracker', 'List Tracker'), ('daily_tracker', 'Daily Tracker'), ('list_created_by_user', 'List Created By User')], max_length=30, null=True)),
                ('task_being_tracked', models.CharField(blank=True, max_length=100, null=True)),
                ('list_items', models.JSONField(blank=True, help_text='Oryginalna lista (list_created_by_user)', null=True)),
                ('keep_streak', models.BooleanField(blank=True, null=True)),
                ('track_daily_quantity', models.BooleanField(blank=True, null=True)),
                ('unit_tracked', models.CharField(blank=True, max_length=20, null=True)),
                ('challenge_or_friendly', models.CharField(blank=True, choices=[('challenge', 'Challenge'), ('friendly', 'Friendly')], max_length=20, null=True)),
                ('winning_condition', models.CharField(blank=True, max_length=200, null=True)),
                ('winning_number', models.PositiveIntegerField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('winners_prize', models.CharField(blank=True, max_length=200, null=True)),
                ('goal_status', models.CharField(blank=True, choices=[('active', 'Active'), ('pending_finish', 'Pending Finish'), ('finished', 'Finished')], max_length=20, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('buddy', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='buddy_goals', to=settings.AUTH_USER_MODEL)),
                ('creator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_goals', to=settings.AUTH_USER_MODEL)),
                ('loser_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lost_goals', to=settings.AUTH_USER_MODEL)),
                ('winner_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='won_goals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-updated_at'],
                'indexes': [models.Index(fields=['challenge_or_friendly', 'end_date'], name='goals_goal_challen_6f1d2a_idx')],
            },
        ),
        migrations.CreateModel(
            name='GoalProgress',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('numeric_value', models.FloatField(blank=True, null=True)),
                ('completed_days', models.JSONField(blank=True, default=list, help_text="Lista dat 'YYYY-MM-DD'")),
                ('list_items', models.JSONField(blank=True, default=list)),
                ('has_seen_winner_message', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('goal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='progress_entries', to='goals.goal')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='goal_progress', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('goal', 'user')},
            },
        ),
    ]
