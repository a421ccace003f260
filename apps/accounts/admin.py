from django.contrib import admin

from apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'full_name', 'role', 'current_cohort', 'is_active', 'date_joined')
    list_filter = ('role', 'is_active', 'current_cohort')
    search_fields = ('email', 'full_name', 'display_name')
    # the pointer is owned by the membership lifecycle
    readonly_fields = ('current_cohort', 'date_joined', 'last_login')
    exclude = ('password', 'groups', 'user_permissions')
