from django.contrib import admin
from .models import Goal, GoalProgress


class GoalProgressInline(admin.TabularInline):
    model = GoalProgress
    extra = 0
    fields = ('user', 'numeric_value', 'completed_days', 'has_seen_winner_message', 'updated_at')
    readonly_fields = ('updated_at',)


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ('name', 'goal_type', 'challenge_or_friendly', 'goal_status', 'creator', 'buddy', 'end_date')
    list_filter = ('goal_type', 'challenge_or_friendly', 'goal_status')
    search_fields = ('name', 'task_being_tracked')
    # Zwycięzcę ustala tylko silnik rozstrzygania
    readonly_fields = ('winner_user', 'loser_user', 'created_at', 'updated_at')
    inlines = [GoalProgressInline]


@admin.register(GoalProgress)
class GoalProgressAdmin(admin.ModelAdmin):
    list_display = ('goal', 'user', 'numeric_value', 'has_seen_winner_message', 'updated_at')
    list_filter = ('has_seen_winner_message',)
